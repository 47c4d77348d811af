"""
Exceptions raised by the event pipeline and its API-boundary helpers.

Every error carries a stable ErrorCode so callers can log and classify
failures without matching on message text.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable identifiers for pipeline failures."""

    MEDIA_DOWNLOAD_FAILED = "MEDIA_DOWNLOAD_FAILED"
    MEDIA_TOO_LARGE = "MEDIA_TOO_LARGE"
    MEDIA_WRITE_FAILED = "MEDIA_WRITE_FAILED"
    WEBHOOK_FAILED = "WEBHOOK_FAILED"
    MALFORMED_EVENT = "MALFORMED_EVENT"
    INVALID_JID = "INVALID_JID"
    CLIENT_NOT_INITIALIZED = "CLIENT_NOT_INITIALIZED"
    NOT_CONNECTED = "NOT_CONNECTED"
    NOT_LOGGED_IN = "NOT_LOGGED_IN"


class BridgeError(Exception):
    """Base exception for bridge-related errors."""

    def __init__(self, message: str, error_code: ErrorCode):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class MediaDownloadError(BridgeError):
    """Raised when the protocol client cannot fetch an attachment."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.MEDIA_DOWNLOAD_FAILED):
        super().__init__(message, error_code)


class MediaTooLargeError(MediaDownloadError):
    """Raised when a downloaded attachment exceeds the configured size limit."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"Media size {size} bytes exceeds the limit of {limit} bytes",
            ErrorCode.MEDIA_TOO_LARGE,
        )


class MediaWriteError(BridgeError):
    """Raised when an attachment cannot be written to the media root."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Failed to write media to {path}: {reason}", ErrorCode.MEDIA_WRITE_FAILED)


class WebhookError(BridgeError):
    """Uniform failure for any step of a webhook delivery."""

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        super().__init__(message, ErrorCode.WEBHOOK_FAILED)


class MalformedEventError(BridgeError):
    """Raised when an inbound event cannot be parsed into a known variant."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.MALFORMED_EVENT)


class InvalidJIDError(BridgeError):
    """Raised when an address cannot be parsed or is not on WhatsApp."""

    def __init__(self, message: str = "invalid JID"):
        super().__init__(message, ErrorCode.INVALID_JID)


class ClientNotInitializedError(BridgeError):
    """Raised when the protocol client has not been created yet."""

    def __init__(self):
        super().__init__("WhatsApp client is not initialized", ErrorCode.CLIENT_NOT_INITIALIZED)


class NotConnectedError(BridgeError):
    """Raised when the protocol client is not connected."""

    def __init__(self):
        super().__init__("you are not connect to services server, please reconnect", ErrorCode.NOT_CONNECTED)


class NotLoggedInError(BridgeError):
    """Raised when the protocol client is connected but not logged in."""

    def __init__(self):
        super().__init__("you are not login to services server, please login", ErrorCode.NOT_LOGGED_IN)
