"""Core: configuration, logging, counters and the instrumentor."""
