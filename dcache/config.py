"""
Cache configuration.

A ``CacheConfig`` can be built directly or from environment variables:

- DCACHE_BACKEND: Backend name (ring, lru)
- DCACHE_MAX_ITEMS: Capacity; empty or "none" means unbounded
- DCACHE_DEFAULT_TTL: Default TTL in seconds; empty or "none" means no expiry
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, model_validator

from dcache.backends.factory import BackendType
from dcache.exceptions import ConfigurationError

_UNSET_VALUES = ("", "none", "null")


class CacheConfig(BaseModel):
    """Configuration for a cache backend."""

    model_config = ConfigDict(frozen=True)

    backend: BackendType = BackendType.LRU
    max_items: Optional[int] = Field(default=None, ge=0)
    default_ttl: Optional[float] = None

    @model_validator(mode="after")
    def _check_capacity(self) -> "CacheConfig":
        if self.backend is BackendType.RING and (self.max_items is None or self.max_items < 1):
            raise ValueError("the ring backend requires max_items >= 1")
        return self

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "CacheConfig":
        """
        Load configuration from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        values = {}

        backend = env.get("DCACHE_BACKEND")
        if backend and backend.strip():
            values["backend"] = backend.strip().lower()

        for field_name, var in (("max_items", "DCACHE_MAX_ITEMS"), ("default_ttl", "DCACHE_DEFAULT_TTL")):
            raw = env.get(var)
            if raw is not None and raw.strip().lower() not in _UNSET_VALUES:
                values[field_name] = raw.strip()

        try:
            return cls(**values)
        except PydanticValidationError as e:
            raise ConfigurationError("Invalid dcache configuration in environment", e) from e
