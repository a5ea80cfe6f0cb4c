"""
Input checks for candidate answers.

Answers are forwarded verbatim to the interviewer model, so text that hides
content from a human reader is rejected before it is stored.
"""
import re

# zero-width space / non-joiner / joiner, BOM
INVISIBLE_CHARS = frozenset("\u200b\u200c\u200d\ufeff")

# LRE, RLE, PDF, LRO, RLO
BIDI_OVERRIDE_CHARS = frozenset("\u202a\u202b\u202c\u202d\u202e")

MAX_CONTROL_CHARS = 5

_CONTROL_CHAR = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def contains_hidden_text(answer: str) -> bool:
    """True if the answer uses invisible, bidi-override or many control characters."""
    if not INVISIBLE_CHARS.isdisjoint(answer) or not BIDI_OVERRIDE_CHARS.isdisjoint(answer):
        return True
    return len(_CONTROL_CHAR.findall(answer)) > MAX_CONTROL_CHARS


def validate_answer_text(answer: str) -> str:
    """
    Pydantic field check for `SendMessageRequest.content`.

    Raises:
        ValueError: Blank answer, or one that hides part of its text
    """
    if not answer or not answer.strip():
        raise ValueError("Message content cannot be empty")
    if contains_hidden_text(answer):
        raise ValueError("Message contains unsupported characters. Please use plain text.")
    return answer
