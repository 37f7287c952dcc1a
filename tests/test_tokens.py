"""Tests for local token estimation."""

import pytest

from llm_bench.tokens import estimate_tokens, get_encoding


def _encoding_available() -> bool:
    try:
        get_encoding()
    except Exception:
        return False
    return True


pytestmark = pytest.mark.skipif(
    not _encoding_available(), reason="cl100k_base vocabulary could not be loaded"
)


def test_empty_text():
    assert estimate_tokens("") == 0


def test_known_counts():
    assert estimate_tokens("hello world") == 2
    assert estimate_tokens("hello") == 1


def test_deterministic():
    text = "Compute the square root of 7, rounded to two decimal places."
    assert estimate_tokens(text) == estimate_tokens(text)
    assert estimate_tokens(text) > 0


def test_special_token_text_is_counted():
    assert estimate_tokens("<|endoftext|>") > 0
