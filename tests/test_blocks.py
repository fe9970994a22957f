"""Unit tests for decoding content blocks from stored payloads."""

from __future__ import annotations

import logging

import pytest

from studycamp_pages.content import (
    Callout,
    CalloutItem,
    Divider,
    Gallery,
    Heading,
    Image,
    ListBlock,
    Paragraph,
    Signature,
    decode_block,
    decode_blocks,
)


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"type": "paragraph", "content": "Hi"}, Paragraph(text="Hi")),
        (
            {"type": "heading", "level": 3, "content": "Sub"},
            Heading(text="Sub", level=3),
        ),
        (
            {"type": "list", "items": ["a", "b"], "bulletColor": "coral"},
            ListBlock(items=["a", "b"], bullet_color="coral"),
        ),
        (
            {"type": "image", "src": "/a.png", "alignment": "full"},
            Image(src="/a.png", alignment="full"),
        ),
        ({"type": "signature", "name": "Jane"}, Signature(name="Jane")),
        ({"type": "divider", "style": "dots"}, Divider(style="dots")),
    ],
)
def test_decode_block_builds_typed_variants(
    payload: dict[str, object], expected: object
) -> None:
    """Each stored ``type`` maps to its struct with wire names applied."""
    block = decode_block(payload)
    assert block == expected, f"expected {expected!r}, got {block!r}"


def test_callout_items_keep_strong_and_plain_kinds() -> None:
    block = decode_block(
        {
            "type": "callout",
            "color": "blue",
            "content": [
                {"type": "strong", "content": "Bold claim"},
                {"type": "plain", "content": "Supporting text"},
            ],
        }
    )
    assert isinstance(block, Callout), f"expected Callout, got {block!r}"
    assert block.content == [
        CalloutItem(kind="strong", text="Bold claim"),
        CalloutItem(kind="plain", text="Supporting text"),
    ], f"unexpected callout items {block.content!r}"
    assert block.color == "blue", "expected callout colour to be preserved"


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "carousel", "slides": []},
        {"type": "heading", "level": 4, "content": "Too deep"},
        {"type": "list", "items": []},
        {"type": "image", "src": ""},
        {"type": "gallery", "images": []},
        {"type": "divider", "style": "wavy"},
        "not a mapping",
    ],
)
def test_malformed_blocks_decode_to_none(
    payload: object, caplog: pytest.LogCaptureFixture
) -> None:
    """Unknown types and invariant violations are dropped, not raised."""
    with caplog.at_level(logging.WARNING, logger="studycamp_pages.content.blocks"):
        assert decode_block(payload) is None, f"expected {payload!r} to be dropped"
    assert caplog.records, "expected a warning for the skipped block"


def test_legacy_block_types_are_upgraded() -> None:
    strong = decode_block({"type": "strong", "content": "Listen"})
    quote = decode_block({"type": "blockquote", "content": "Quoted"})
    separator = decode_block({"type": "separator"})
    assert strong == Paragraph(text="**Listen**"), f"unexpected strong {strong!r}"
    assert quote == Callout(content="Quoted"), f"unexpected quote {quote!r}"
    assert separator == Divider(style="line"), f"unexpected separator {separator!r}"


def test_decode_blocks_preserves_order_and_skips_bad_entries() -> None:
    blocks = decode_blocks(
        [
            {"type": "paragraph", "content": "one"},
            {"type": "mystery"},
            {"type": "gallery", "images": [{"src": "/1.png"}, {"src": "/2.png"}]},
        ]
    )
    assert len(blocks) == 2, f"expected the unknown block to be dropped, got {blocks!r}"
    assert blocks[0] == Paragraph(text="one"), "expected paragraph first"
    assert isinstance(blocks[1], Gallery), "expected gallery second"
    assert [image.src for image in blocks[1].images] == ["/1.png", "/2.png"], (
        "expected gallery images in stored order"
    )
