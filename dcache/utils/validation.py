from numbers import Real
from typing import Any, Optional

from dcache.exceptions import ConfigurationError, ValidationError

def validate_max_items(max_items: Optional[int], allow_unbounded: bool = True, minimum: int = 0) -> None:
    """Validates a capacity value.

    ``None`` means unbounded and is only accepted when ``allow_unbounded`` is set.
    """
    if max_items is None:
        if not allow_unbounded:
            raise ConfigurationError("max_items is required for this backend.")
        return

    if isinstance(max_items, bool) or not isinstance(max_items, int):
        raise ConfigurationError(f"max_items must be an integer, got {type(max_items).__name__}.")

    if max_items < minimum:
        raise ConfigurationError(f"max_items is {max_items}, it should be >= {minimum}.")

def validate_ttl(ttl: Optional[float]) -> None:
    """Validates a TTL in seconds. Zero and negative values are allowed."""
    if ttl is None:
        return

    if isinstance(ttl, bool) or not isinstance(ttl, Real):
        raise ValidationError(f"TTL must be a number of seconds or None, got {type(ttl).__name__}.")

    if ttl != ttl:
        raise ValidationError("TTL cannot be NaN.")

def validate_callable(func: Any, name: str) -> None:
    """Ensures a predicate, fallback or factory is callable."""
    if not callable(func):
        raise ValidationError(f"{name} must be callable.")
