from __future__ import annotations

import re
from datetime import timedelta
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError


__version__ = "1.0.1"

DEFAULT_BASE_URL = "https://api.shopsavvy.com/v1"
DEFAULT_TIMEOUT = 30.0  # seconds
DEFAULT_MAX_RETRIES = 0
DEFAULT_USER_AGENT = f"ShopSavvy-Python-SDK/{__version__}"

API_KEY_PATTERN = re.compile(r"^ss_(live|test)_[a-zA-Z0-9]+$")


def validate_api_key(api_key: Optional[str]) -> str:
    """Check the key shape locally; the API itself is never contacted."""
    if not api_key:
        raise ConfigurationError(
            "API key is required. Get one at https://shopsavvy.com/data"
        )
    if not isinstance(api_key, str) or not API_KEY_PATTERN.fullmatch(api_key):
        raise ConfigurationError(
            "Invalid API key format. API keys should start with ss_live_ or ss_test_"
        )
    return api_key


class ClientConfig(BaseModel):
    """
    Immutable settings for a ShopSavvyClient.

    Build it with ClientConfig.create() so that a bad key or option surfaces
    as a ConfigurationError rather than a pydantic error.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="Request timeout in seconds")
    max_retries: int = Field(
        DEFAULT_MAX_RETRIES, ge=0, description="Connection-level retries per request"
    )
    user_agent: str = DEFAULT_USER_AGENT

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got '{v}'")
        return v

    @field_validator("timeout", mode="before")
    @classmethod
    def validate_timeout(cls, v: Any) -> Any:
        if isinstance(v, timedelta):
            return v.total_seconds()
        return v

    @property
    def environment(self) -> str:
        """'live' or 'test', read from the key prefix."""
        return self.api_key.split("_", 2)[1]

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: Optional[Any] = None,
        max_retries: Optional[int] = None,
        user_agent: Optional[str] = None,
    ) -> "ClientConfig":
        validate_api_key(api_key)

        overrides = {
            "base_url": base_url,
            "timeout": timeout,
            "max_retries": max_retries,
            "user_agent": user_agent,
        }
        try:
            return cls(
                api_key=api_key,
                **{k: v for k, v in overrides.items() if v is not None},
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid client configuration: {e}") from e
