"""Domain-specific errors for ppba-alpaca."""


class PpbaError(Exception):
    """Base error for ppba-alpaca."""


class SettingsError(PpbaError):
    """Raised when the settings file cannot be read."""


class SettingsValidationError(SettingsError):
    """Raised when settings do not conform to schema or semantics."""


class DuplicateDeviceError(PpbaError):
    """Raised when a device key is already registered."""


class DeviceUnavailableError(PpbaError):
    """Raised when an action targets a device that has been closed."""


class HandshakeError(PpbaError):
    """Raised when the startup handshake with the box fails."""


class ServerStartError(PpbaError):
    """Raised when the HTTP listener cannot be bound."""


class RoutingError(PpbaError):
    """Base error for requests that cannot be routed to a device action."""

    status_code = 400


class InvalidPathError(RoutingError):
    status_code = 400


class InvalidDeviceNumberError(RoutingError):
    status_code = 400


class DeviceNotFoundError(RoutingError):
    status_code = 404


class UnknownActionError(RoutingError):
    status_code = 404


class TransportError(PpbaError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised when the serial link cannot be opened."""


class TransportSendError(TransportError):
    """Raised when writing to or reading from the link fails."""


class TransportTimeoutError(TransportError):
    """Raised when a write or read phase exceeds its timeout."""
