"""Custom exceptions used throughout the pihal package."""

from typing import Any, Iterable, Optional


class PiHalError(Exception):
    """Base exception for all pihal errors.

    All pihal-specific exceptions should inherit from this class.
    This allows catching all library errors with a single except clause.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Additional context about the error
        """

        super().__init__(message)
        self.details = details or {}


class ConfigurationError(PiHalError):
    """Raised when there's an error in configuration.

    This includes:
    - Invalid configuration value
    - Missing required configuration
    - Configuration validation failures
    """

    def __init__(
        self,
        config_key: Optional[str] = None,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        """Initialize configuration error.

        Args:
            config_key: The configuration key that caused the error
            message: Description of what's wrong. If omitted, config_key is
                treated as the message and the key defaults to "configuration".
            details: Additional context
        """
        if message is None:
            message = config_key or "Invalid configuration"
            config_key = "configuration"
        if config_key is None:
            config_key = "configuration"

        full_message = f"Configuration error for '{config_key}': {message}"
        super().__init__(message=full_message, details=details)
        self.config_key = config_key


class InvalidPinFunctionError(PiHalError):
    """Raised when a pin function is unsupported or not allowed.

    Examples:
    - Symbolic alternate function not offered by the pin
    - high()/low() on a pin that is not an output
    - set_pull() on a pin that is not an input
    """

    def __init__(
        self,
        pin_number: int,
        message: Optional[str] = None,
        function: Optional[int] = None,
        operation: Optional[str] = None,
        valid_functions: Optional[Iterable[int]] = None,
    ):
        valid = [int(f) for f in valid_functions] if valid_functions is not None else None
        if message is None:
            message = (
                f"Pin {pin_number} is set to invalid function "
                f"({None if function is None else int(function)}) "
                f"for {operation}(). Supported functions are "
                f"[{','.join(str(f) for f in valid or [])}]"
            )
        details: dict[str, Any] = {"pin": pin_number}
        if function is not None:
            details["function"] = int(function)
        if operation is not None:
            details["operation"] = operation
        if valid is not None:
            details["valid_functions"] = valid

        super().__init__(message=message, details=details)
        self.pin_number = pin_number
        self.function = function
        self.operation = operation


class InvalidValueError(PiHalError):
    """Raised when a pin or peripheral number is outside the supported range."""

    def __init__(
        self,
        kind: str,
        value: Any,
        supported: Optional[Iterable[Any]] = None,
    ):
        supported_list = list(supported) if supported is not None else []
        message = f"Invalid {kind} {value!r}"
        if supported_list:
            message += f"; supported: {supported_list}"
        super().__init__(
            message=message,
            details={"kind": kind, "value": value, "supported": supported_list},
        )
        self.kind = kind
        self.value = value


class InitializationError(PiHalError):
    """Raised when a register window cannot be mapped.

    Typical causes are insufficient privilege, an unsupported platform or
    address-space exhaustion. Retrying without operator intervention is
    pointless, so callers receive the error as-is.
    """

    def __init__(
        self,
        family: str,
        message: str,
        device: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        details = dict(details or {})
        details["family"] = family
        if device is not None:
            details["device"] = device
        super().__init__(
            message=f"Cannot initialise {family} registers: {message}",
            details=details,
        )
        self.family = family
        self.device = device


class RegisterAccessError(PiHalError):
    """Base exception for invalid register window accesses."""

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        if offset is not None:
            details = details or {}
            details["offset"] = f"0x{offset:04X}"

        super().__init__(message=message, details=details)
        self.offset = offset


class RegisterAlignmentError(RegisterAccessError):
    """Raised when a register offset is not 32-bit aligned."""

    def __init__(self, offset: int, details: Optional[dict[str, Any]] = None):
        message = f"Unaligned register access at offset 0x{offset:04X}"
        super().__init__(message=message, offset=offset, details=details)


class RegisterBoundsError(RegisterAccessError):
    """Raised when a register offset lies outside its window."""

    def __init__(
        self,
        offset: int,
        window: str,
        size: int,
        details: Optional[dict[str, Any]] = None,
    ):
        message = (
            f"Out-of-bounds access in {window} window: "
            f"offset=0x{offset:04X}, size=0x{size:X}"
        )
        super().__init__(message=message, offset=offset, details=details)
        self.window = window
        self.size = size
