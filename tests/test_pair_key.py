from __future__ import annotations

import pytest

from emojimash.exceptions import InputFormatError
from emojimash.pair_key import normalize, split_pair


def test_normalize_is_order_independent() -> None:
    assert normalize("😀", "😂") == normalize("😂", "😀")


def test_normalize_orders_lexicographically() -> None:
    assert normalize("b", "a") == ("a", "b")
    assert normalize("a", "b") == ("a", "b")


def test_normalize_same_token_twice() -> None:
    assert normalize("🐱", "🐱") == ("🐱", "🐱")


def test_split_pair_strips_whitespace() -> None:
    assert split_pair(" 😀 _😂 ") == ("😀", "😂")


def test_split_pair_custom_separator() -> None:
    assert split_pair("😀+😂", "+") == ("😀", "😂")


@pytest.mark.parametrize("raw", ["😀", "😀_😂_🙂", "_😂", "😀_", " _ ", ""])
def test_split_pair_rejects_malformed_queries(raw: str) -> None:
    with pytest.raises(InputFormatError):
        split_pair(raw)
