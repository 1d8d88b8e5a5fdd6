"""Domain-specific exceptions."""

from __future__ import annotations


class ProjectNotFoundError(Exception):
    """Raised when a project is missing, deleted, or hidden from the viewer."""


class ItemNotFoundError(Exception):
    """Raised when an item lookup fails."""


class DonationNotFoundError(Exception):
    """Raised when a donation lookup fails."""


class PermissionDeniedError(Exception):
    """Raised when a non-owner tries to manage a project."""


class InvalidAmountError(ValueError):
    """Raised when a donation amount is missing or not positive."""


class RateLimitExceededError(Exception):
    """Raised when a client exceeds its request window."""

    def __init__(self, reset_at: float):
        super().__init__("Too many requests, try again later")
        self.reset_at = reset_at
