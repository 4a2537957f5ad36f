"""Tests for SessionState transitions."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.session import SessionState


@pytest.fixture()
def state() -> SessionState:
    return SessionState.for_options(["Yes", "No"])


class TestToggle:
    """Validate option toggling."""

    def test_toggle_on_then_off(self, state) -> None:
        assert state.toggle_option("Yes") is True
        assert state.selected_options == {"Yes"}
        assert state.toggle_option("Yes") is False
        assert state.selected_options == set()

    def test_toggles_are_independent(self, state) -> None:
        state.toggle_option("Yes")
        state.toggle_option("No")
        assert state.selected_options == {"Yes", "No"}

    def test_no_options_mode_rejects_toggle(self) -> None:
        empty = SessionState.for_options([])
        assert empty.has_options is False
        with pytest.raises(RuntimeError):
            empty.toggle_option("Yes")

    def test_ordered_selection_follows_offer_order(self, state) -> None:
        state.toggle_option("No")
        state.toggle_option("Yes")
        assert state.ordered_selection() == ["Yes", "No"]

    def test_is_known_option(self, state) -> None:
        assert state.is_known_option("Yes")
        assert not state.is_known_option("Maybe")


class TestKeyboardOwner:
    """Validate first-write-wins ownership of the option keyboard."""

    def test_first_write_wins(self, state) -> None:
        assert state.set_keyboard_owner(10) is True
        assert state.set_keyboard_owner(11) is False
        assert state.options_message_id == 10

    def test_never_set_without_options(self) -> None:
        empty = SessionState.for_options([])
        assert empty.set_keyboard_owner(10) is False
        assert empty.options_message_id is None


class TestUserInput:
    """Validate free-text recording."""

    def test_starts_empty(self, state) -> None:
        assert state.user_input == ""

    def test_overwritten_wholesale(self, state) -> None:
        state.record_user_input("first draft")
        state.record_user_input("final")
        assert state.user_input == "final"


class TestOffset:
    """Validate offset bookkeeping."""

    def test_advance_to_next_id(self, state) -> None:
        assert state.advance_offset(41) == 42

    def test_never_moves_backwards(self, state) -> None:
        for update_id in (5, 9, 3, 9, 7):
            state.advance_offset(update_id)
        assert state.offset == 10

    def test_sequence_ends_at_max_plus_one(self, state) -> None:
        observed = [100, 101, 102, 110]
        offsets = [state.advance_offset(update_id) for update_id in observed]
        assert offsets == sorted(offsets)
        assert state.offset == max(observed) + 1
