from __future__ import annotations

import json

import pytest

from conftest import make_document
from emojimash.exceptions import RefreshDecodeError
from emojimash.ingestion.metadata import parse_metadata


def _document(data: object) -> bytes:
    return json.dumps({"data": data}).encode("utf-8")


def test_flattens_groups_across_base_entries() -> None:
    body = make_document(
        [
            ("😀", "😂", "http://x/1.png"),
            ("😀", "😎", "http://x/2.png"),
            ("🐱", "🔥", "http://x/3.png"),
        ]
    )

    parsed = parse_metadata(body)

    assert parsed.skipped == 0
    assert [(r.left_emoji, r.right_emoji, r.image_url) for r in parsed.records] == [
        ("😀", "😂", "http://x/1.png"),
        ("😀", "😎", "http://x/2.png"),
        ("🐱", "🔥", "http://x/3.png"),
    ]
    assert parsed.records[2].base_emoji == "🐱"


def test_malformed_records_are_skipped_and_counted() -> None:
    body = _document(
        {
            "a": {
                "emoji": "😀",
                "combinations": {
                    "g1": [
                        {"leftEmoji": "😀", "rightEmoji": "😂", "gStaticUrl": "http://x/1.png"},
                        {"leftEmoji": "😀", "gStaticUrl": "http://x/missing-right.png"},
                        {"leftEmoji": "😀", "rightEmoji": "🙂", "gStaticUrl": ""},
                        {"leftEmoji": 5, "rightEmoji": "🙂", "gStaticUrl": "http://x/int.png"},
                        "not an object",
                    ],
                },
            },
        }
    )

    parsed = parse_metadata(body)

    assert len(parsed.records) == 1
    assert parsed.records[0].image_url == "http://x/1.png"
    assert parsed.skipped == 4


def test_malformed_entries_and_groups_do_not_abort() -> None:
    body = _document(
        {
            "broken": "nope",
            "no-combos": {"emoji": "🙂"},
            "bad-group": {"emoji": "🐱", "combinations": {"g": {"not": "a list"}}},
            "ok": {
                "combinations": {"g": [{"leftEmoji": "🐶", "rightEmoji": "🐱", "gStaticUrl": "http://x/4.png"}]},
            },
        }
    )

    parsed = parse_metadata(body)

    assert len(parsed.records) == 1
    assert parsed.records[0].base_emoji == ""


@pytest.mark.parametrize(
    "body",
    [
        b"\xff\xfe not utf-8",
        b"{not json",
        b"[]",
        b'{"knownSupportedEmoji": []}',
        b'{"data": []}',
        b'{"data": ' + b"[" * 200_000 + b"]" * 200_000 + b"}",
    ],
)
def test_undecodable_documents_raise_decode_error(body: bytes) -> None:
    with pytest.raises(RefreshDecodeError):
        parse_metadata(body)


def test_empty_data_object_is_valid() -> None:
    parsed = parse_metadata(_document({}))

    assert parsed.records == []
    assert parsed.skipped == 0
