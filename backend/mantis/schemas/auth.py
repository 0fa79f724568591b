"""Credential variants used to authenticate metric delivery."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mantis.core.exceptions import ConfigurationError
from mantis.core.shared_models import AuthProvider


class ApiKeyCredential(BaseModel):
    """API key issued to username/password accounts."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., min_length=1)

    def headers(self) -> dict[str, str]:
        return {"X-API-Key": self.api_key}


class OAuthCredential(BaseModel):
    """OAuth token obtained through Google or GitHub login."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., min_length=1)
    provider: AuthProvider

    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "X-Auth-Provider": self.provider.value,
        }


AuthCredential = Union[ApiKeyCredential, OAuthCredential]


def resolve_credential(
    api_key: Optional[str] = None,
    token: Optional[str] = None,
    auth_provider: Optional[Union[str, AuthProvider]] = None,
) -> AuthCredential:
    """Pick the credential variant from the raw options.

    A non-empty API key wins. Otherwise both a token and a provider are
    required.

    Raises:
        ConfigurationError: if neither variant can be built, or the provider
            is not one of ``google`` / ``github``.
    """
    if api_key:
        return ApiKeyCredential(api_key=api_key)
    if not token or not auth_provider:
        raise ConfigurationError()
    try:
        return OAuthCredential(token=token, provider=auth_provider)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid OAuth credential: {auth_provider!r} is not supported.") from e
