"""Text payloads sent back to the remote chat.

The feedback payload is read directly by a human operator and by the
requesting application, so its wording is part of the external interface and
must stay stable.
"""

from typing import Sequence

CONTINUE_PROMPT = "Please continue with the current task, following best practices."
OPERATION_PROMPT = "Toggle the options above, type a reply if needed, then press Send."
TEST_MESSAGE = "🤖 Test message: the relay bot can reach this chat."

FEEDBACK_HEADER = "✅ Feedback submitted"
CONTINUE_HEADER = "⏩ Continue"
EMPTY_FEEDBACK = "(no options selected, no input)"

_ENHANCE_TEMPLATE = """\
Rewrite the instruction quoted between 《 and 》 below so that it is clearer, \
more specific, less ambiguous and free of mistakes. Take the conversation so \
far into account, answer right away even if unsure, and deliver the result \
through the same feedback channel this request came from. Reply in this format:

### BEGIN RESPONSE ###
Here is an enhanced version of the original instruction that is more specific and clear:
<enhanced-prompt>enhanced prompt goes here</enhanced-prompt>

### END RESPONSE ###

Here is my original instruction:

《{text}》"""


def build_feedback_message(selected: Sequence[str], free_text: str, is_continue: bool) -> str:
    """Compose the feedback payload.

    With *is_continue* the fixed continue payload is returned and the other
    arguments are ignored.  Otherwise the payload lists the selected options
    and the free text, whichever are present, or states that both are empty.
    Whitespace-only text counts as no input.
    """
    if is_continue:
        return f"{CONTINUE_HEADER}\n\n{CONTINUE_PROMPT}"

    sections: list[str] = []
    if selected:
        bullets = "\n".join(f"• {option}" for option in selected)
        sections.append(f"Selected options:\n{bullets}")
    text = free_text.strip()
    if text:
        sections.append(f"Input:\n{text}")
    if not sections:
        sections.append(EMPTY_FEEDBACK)
    return "\n\n".join([FEEDBACK_HEADER, *sections])


def build_enhance_prompt(user_input: str) -> str:
    """Wrap the remote user's draft in an instruction-rewriting prompt."""
    return _ENHANCE_TEMPLATE.format(text=user_input)


def build_enhance_ack(user_input: str) -> str:
    return f"✨ Enhance request sent\n\n📝 Original: {user_input}"
