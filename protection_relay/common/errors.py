"""
Error taxonomy shared by the pricing policy, the storefront client, and the API layer.
"""

from __future__ import annotations


class ProtectionRelayError(Exception):
    """Base class for errors surfaced by the relay."""


class InvalidInput(ProtectionRelayError):
    """Raised when a request carries a missing or malformed subtotal or new_price."""


class RemoteError(ProtectionRelayError):
    """Raised when the storefront Admin API answers with a non-success status."""

    def __init__(self, *, status: int, reason: str = "", body: str = "") -> None:
        self.status = status
        self.reason = reason
        self.body = body
        message = f"Shopify Admin API error: {status} {reason}".rstrip()
        if body:
            message = f"{message} - {body}"
        super().__init__(message)


class UnknownError(ProtectionRelayError):
    """Raised for transport or payload failures that have no more specific category."""
