"""
Transcript helpers shared by the orchestrator and the aggregator.
"""
from typing import List, Tuple

from mock_interview.domain.models import Message, MessageRole


def find_question(messages: List[Message], index: int) -> str:
    """Content of the nearest ai message before `messages[index]`, or ""."""
    for message in reversed(messages[:index]):
        if message.role == MessageRole.ai:
            return message.content
    return ""


def question_answer_pairs(messages: List[Message]) -> List[Tuple[str, Message]]:
    """Every user message, in order, paired with the question it answers."""
    return [
        (find_question(messages, i), message)
        for i, message in enumerate(messages)
        if message.role == MessageRole.user
    ]
