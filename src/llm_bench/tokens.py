"""Local token counting, used when the endpoint does not report usage.

Counts are produced with tiktoken's ``cl100k_base`` encoding (the encoding
used by gpt-3.5-turbo and gpt-4). Text that looks like a special token is
encoded as ordinary text, so every string has a count.
"""

from __future__ import annotations

from functools import lru_cache

import tiktoken

ENCODING_NAME = "cl100k_base"


@lru_cache(maxsize=1)
def get_encoding() -> tiktoken.Encoding:
    return tiktoken.get_encoding(ENCODING_NAME)


def estimate_tokens(text: str) -> int:
    """Return the number of tokens in ``text``."""
    if not text:
        return 0
    return len(get_encoding().encode(text, disallowed_special=()))
