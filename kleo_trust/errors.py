from __future__ import annotations


class TrustCoreError(Exception):
    """Base class for errors raised by the trust core."""


class InvalidFormat(TrustCoreError, ValueError):
    """Raised when an address is neither a valid H160 nor a valid SS58 string."""

    def __init__(self, message: str, value: object = None) -> None:
        super().__init__(message)
        self.value = value
