class ShipError(Exception):
    """Base class for all Ship errors."""


class ConfigurationError(ShipError):
    """Error raised when platform configuration is used before it is initialized."""


class WrongEnvironmentError(ShipError):
    """Error raised when a component is invoked with another runtime's input."""


class SecurityViolationError(ShipError):
    """Error raised when a deploy path is unsafe (traversal, null bytes, unsafe names)."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class BusinessRuleError(ShipError):
    """Error raised when a file or file set breaks a platform limit."""

    def __init__(self, message: str, path: str | None = None, rule: str | None = None) -> None:
        super().__init__(message)
        self.path = path
        self.rule = rule


class FileIOError(ShipError):
    """Error raised when a file cannot be read. Always names the offending path."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class PlatformError(ShipError):
    """Error raised when a platform API call fails."""
