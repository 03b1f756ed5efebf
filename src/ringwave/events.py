"""Widget-level messages routed between the orb view and its host app."""

from __future__ import annotations

from textual.message import Message


class OrbViewStartFailed(Message):
    """Posted when the orb view cannot start its renderer."""

    def __init__(self, reason: str) -> None:
        super().__init__()
        self.reason = reason
