class DCacheError(Exception):
    """Base class for all dcache exceptions."""
    pass

class ConfigurationError(DCacheError):
    """Raised when a cache is built with an invalid configuration."""
    def __init__(self, message: str, original_exception: Exception = None):
        super().__init__(message)
        self.original_exception = original_exception
        self.message = message

    def __str__(self) -> str:
        if self.original_exception:
            return f"{self.message} (Original: {str(self.original_exception)})"
        return self.message

class ValidationError(DCacheError, ValueError):
    """Raised when an argument passed to a cache operation is invalid."""
    pass

class KeyNotFoundError(DCacheError, KeyError):
    """Raised by get_or_raise() when a key is absent or expired."""
    def __init__(self, key):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"{self.key!r} is not cached"

class UnsupportedOperationError(DCacheError, NotImplementedError):
    """Raised when a backend does not support the requested operation."""
    pass
