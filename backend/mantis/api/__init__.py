"""ASGI bindings."""
