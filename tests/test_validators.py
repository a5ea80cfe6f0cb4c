import pytest

from mock_interview.security.validators import contains_hidden_text, validate_answer_text


def test_plain_text_passes():
    text = "I led a team of 5.\n\tWe shipped on time."
    assert validate_answer_text(text) == text
    assert not contains_hidden_text(text)


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_text_is_rejected(text):
    with pytest.raises(ValueError, match="empty"):
        validate_answer_text(text)


@pytest.mark.parametrize("text", ["hidden\u200bword", "abc\u202edcb", "bom\ufeff"])
def test_invisible_characters_are_rejected(text):
    assert contains_hidden_text(text)
    with pytest.raises(ValueError, match="unsupported characters"):
        validate_answer_text(text)


def test_a_few_control_characters_are_tolerated():
    assert not contains_hidden_text("a\x01b\x02c")
    assert contains_hidden_text("a" + "\x01" * 6)
