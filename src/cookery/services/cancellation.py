"""Explicit cancellation tokens for generation requests."""

import asyncio
from dataclasses import dataclass


@dataclass
class CancellationToken:
    """Cooperative cancellation flag checked at every suspension point."""

    _cancelled: bool = False

    @property
    def cancelled(self) -> bool:
        """Whether cancel() has been called."""
        return self._cancelled

    def cancel(self) -> None:
        """Mark the token as cancelled."""
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        """Raise CancelledError if the token was cancelled."""
        if self._cancelled:
            raise asyncio.CancelledError
