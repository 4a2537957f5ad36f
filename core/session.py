"""Mutable state of one remote feedback session.

Owned by a single polling task; nothing else writes to it, so there is no
locking.
"""

from __future__ import annotations

import dataclasses
from typing import Iterable


@dataclasses.dataclass(slots=True)
class SessionState:
    """Offset, option selection, keyboard owner and last free text of a session.

    ``predefined_options`` is fixed for the session's lifetime.  An empty
    tuple puts the session in no-options mode, where toggles and keyboard
    ownership are never recorded.
    """

    predefined_options: tuple[str, ...] = ()
    offset: int = 0
    selected_options: set[str] = dataclasses.field(default_factory=set)
    options_message_id: int | None = None
    user_input: str = ""

    @classmethod
    def for_options(cls, options: Iterable[str]) -> "SessionState":
        return cls(predefined_options=tuple(options))

    @property
    def has_options(self) -> bool:
        return bool(self.predefined_options)

    def is_known_option(self, label: str) -> bool:
        return label in self.predefined_options

    def toggle_option(self, label: str) -> bool:
        """Flip *label*'s membership and return whether it is selected afterwards.

        Raises:
            RuntimeError: If the session has no predefined options.
        """
        if not self.has_options:
            raise RuntimeError("cannot toggle an option in a session without options")
        if label in self.selected_options:
            self.selected_options.discard(label)
            return False
        self.selected_options.add(label)
        return True

    def ordered_selection(self) -> list[str]:
        """Selected options in the order they were offered."""
        return [option for option in self.predefined_options if option in self.selected_options]

    def record_user_input(self, text: str) -> None:
        self.user_input = text

    def set_keyboard_owner(self, message_id: int) -> bool:
        """Remember which message carries the option keyboard.  First write wins.

        Returns ``True`` when *message_id* was stored.  Sessions without
        options never record an owner.
        """
        if not self.has_options or self.options_message_id is not None:
            return False
        self.options_message_id = message_id
        return True

    def advance_offset(self, update_id: int) -> int:
        """Acknowledge *update_id*.  The offset never moves backwards."""
        self.offset = max(self.offset, update_id + 1)
        return self.offset
