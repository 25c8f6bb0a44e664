"""
Exception hierarchy for WiZard

Every error carries the operation that was attempted, the bulb address and
a human readable reason so callers can log or display a precise message.
"""

from enum import Enum
from typing import Optional


class TransportFailure(str, Enum):
    """Why a UDP round-trip failed"""
    SOCKET_UNAVAILABLE = "socket-unavailable"
    SEND_FAILED = "send-failed"
    RECEIVE_FAILED = "receive-failed"
    TIMEOUT = "timeout"


class ProtocolFailure(str, Enum):
    """Why a bulb reply could not be understood"""
    MALFORMED_JSON = "malformed-json"
    MISSING_EXPECTED_FIELD = "missing-expected-field"
    UNEXPECTED_METHOD = "unexpected-method"
    INVALID_FIELD = "invalid-field"
    DEVICE_ERROR = "device-error"


class WizardError(Exception):
    """Base exception for all WiZard errors"""

    def __init__(self, message: str, operation: Optional[str] = None,
                 address: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.address = address

    def with_context(self, operation: Optional[str] = None,
                     address: Optional[str] = None) -> "WizardError":
        """Fill in operation/address if they are not known yet"""
        if self.operation is None:
            self.operation = operation
        if self.address is None:
            self.address = address
        return self

    def __str__(self) -> str:
        prefix = self.operation or "request"
        if self.address:
            prefix = f"{prefix} on {self.address}"
        return f"{prefix}: {self.message}"


class ConnectError(WizardError):
    """Raised when a bulb connection cannot be set up"""
    pass


class CommunicationError(WizardError):
    """Raised when a request/response exchange with the bulb fails"""
    retriable = True


class TransportError(CommunicationError):
    """Raised when a datagram cannot be sent or no reply arrives in time"""

    def __init__(self, reason: TransportFailure, message: str,
                 operation: Optional[str] = None, address: Optional[str] = None):
        super().__init__(message, operation=operation, address=address)
        self.reason = reason


class ProtocolError(CommunicationError):
    """Raised when the bulb reply is not the JSON we expect"""
    retriable = False

    def __init__(self, reason: ProtocolFailure, message: str,
                 operation: Optional[str] = None, address: Optional[str] = None):
        super().__init__(message, operation=operation, address=address)
        self.reason = reason


class InvalidInputError(WizardError, ValueError):
    """Raised when a caller supplies a value the bulb must never receive"""
    pass
