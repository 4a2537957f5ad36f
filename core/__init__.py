"""Session engine primitives — state, keyboards, feedback text, and logging.

This package is transport-agnostic. It must NEVER import from ``relay/`` or ``sdk/``.
"""

from core.feedback import build_enhance_prompt, build_feedback_message
from core.keyboard import render_action_keyboard, render_options_keyboard
from core.logger import RelayLogger
from core.session import SessionState

__all__ = [
    "build_enhance_prompt",
    "build_feedback_message",
    "render_action_keyboard",
    "render_options_keyboard",
    "RelayLogger",
    "SessionState",
]
