from __future__ import annotations


class NativeHostError(Exception):
    pass


class TransportError(NativeHostError):
    """Frame could not be read from or written to the pipe."""


class IncompleteHeader(TransportError):
    def __init__(self, received: int) -> None:
        super().__init__(f"incomplete frame header: expected 4 bytes, got {received}")
        self.received = received


class IncompleteBody(TransportError):
    def __init__(self, expected: int, received: int) -> None:
        super().__init__(f"incomplete frame body: expected {expected} bytes, got {received}")
        self.expected = expected
        self.received = received


class FrameTooLarge(TransportError):
    def __init__(self, length: int, limit: int) -> None:
        super().__init__(f"frame length {length} exceeds limit {limit}")
        self.length = length
        self.limit = limit


class DecodeError(NativeHostError):
    """Frame payload is not a well-formed request envelope."""


class DispatchError(NativeHostError):
    def __init__(self, action: str) -> None:
        super().__init__(f"Unknown action: {action}")
        self.action = action


class CollaboratorError(NativeHostError):
    """Download or clipboard write failed; the message is surfaced verbatim."""


class ValidationError(NativeHostError):
    pass


class ConfigurationError(NativeHostError):
    def __init__(self, label: str, reason: str) -> None:
        super().__init__(f"{label}: {reason}")
        self.label = label
        self.reason = reason


__all__ = [
    "CollaboratorError",
    "ConfigurationError",
    "DecodeError",
    "DispatchError",
    "FrameTooLarge",
    "IncompleteBody",
    "IncompleteHeader",
    "NativeHostError",
    "TransportError",
    "ValidationError",
]
