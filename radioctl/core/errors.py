"""Domain-specific errors for radioctl."""


class RadioctlError(Exception):
    """Base error for radioctl."""


class ProfileValidationError(RadioctlError):
    """Raised when a modem profile does not conform to schema or semantics."""


class ProfileLoadError(RadioctlError):
    """Raised when loading profile sources fails."""


class ProfileSelectionError(RadioctlError):
    """Raised when a profile id cannot be resolved."""


class DriverRegistryError(RadioctlError):
    """Raised when no registered driver can be bound to a modem."""


class SettingsError(RadioctlError):
    """Base error for radio settings requests."""


class CapabilityMissingError(SettingsError):
    """Raised when the driver does not implement the requested operation."""


class InvalidArgumentError(SettingsError):
    """Raised for unknown properties or malformed values."""


class UnsupportedValueError(SettingsError):
    """Raised when a value is well-formed but the modem cannot realize it."""


class DriverFailureError(SettingsError):
    """Raised when a driver operation completes with an error."""


class SettingsClosedError(SettingsError):
    """Raised for requests still queued when the settings instance is torn down."""
