"""Tagged-union content blocks for sectioned documents.

Every renderable unit inside a :class:`~studycamp_pages.content.ContentSection`
is one of the frozen ``msgspec`` structs defined here. The union is closed and
discriminated by the ``type`` field stored alongside each block, so the
renderer can dispatch exhaustively instead of probing for optional keys.

Wire names follow the JSON kept in the content store: block text is stored
under ``content`` and list bullets under ``bulletColor``.

Example
-------
>>> from studycamp_pages.content.blocks import decode_block
>>> decode_block({"type": "heading", "level": 2, "content": "Intro"})
Heading(text='Intro', level=2)
>>> decode_block({"type": "carousel"}) is None
True
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import typing as typ

import msgspec

logger = logging.getLogger(__name__)

BulletColor = typ.Literal["default", "blue", "coral", "yellow-orange"]
CalloutColor = typ.Literal["gray", "blue", "coral", "yellow-orange"]
DividerStyle = typ.Literal["none", "dots", "line", "asterisk"]
ImageAlignment = typ.Literal["left", "center", "right", "full"]

NonEmptyStr = typ.Annotated[str, msgspec.Meta(min_length=1)]


class _Block(
    msgspec.Struct, tag_field="type", frozen=True, kw_only=True, omit_defaults=True
):
    """Shared struct configuration for all block variants."""


class Paragraph(_Block, tag="paragraph"):
    """Body text; markdown inline formatting is allowed."""

    text: str = msgspec.field(default="", name="content")


class Heading(_Block, tag="heading"):
    """Section or sub-section heading; level 2 headings drive navigation."""

    text: str = msgspec.field(name="content")
    level: typ.Literal[2, 3] = 2


class ListBlock(_Block, tag="list"):
    """Bulleted or numbered list."""

    items: typ.Annotated[list[str], msgspec.Meta(min_length=1)]
    bullet_color: BulletColor = msgspec.field(default="default", name="bulletColor")
    ordered: bool = False


class Image(_Block, tag="image"):
    """Single figure with optional caption."""

    src: NonEmptyStr
    alt: str = ""
    caption: str | None = None
    alignment: ImageAlignment = "center"


class GalleryImage(msgspec.Struct, frozen=True, kw_only=True, omit_defaults=True):
    """One entry of a :class:`Gallery`."""

    src: NonEmptyStr
    alt: str | None = None
    caption: str | None = None


class Gallery(_Block, tag="gallery"):
    """Grid of images rendered together."""

    images: typ.Annotated[list[GalleryImage], msgspec.Meta(min_length=1)]


class CalloutItem(msgspec.Struct, frozen=True, kw_only=True):
    """A line of callout copy, optionally emphasised."""

    kind: typ.Literal["strong", "plain"] = msgspec.field(default="plain", name="type")
    text: str = msgspec.field(name="content")


class Callout(_Block, tag="callout"):
    """Highlighted aside, either a single string or a list of lines."""

    content: str | list[CalloutItem] = ""
    color: CalloutColor = "gray"


class Signature(_Block, tag="signature"):
    """Author sign-off at the end of a letter."""

    name: str
    title: str = ""


class Divider(_Block, tag="divider"):
    """Visual break between sections."""

    style: DividerStyle = "line"


class CodeBlock(_Block, tag="code"):
    """Fenced code sample."""

    text: str = msgspec.field(default="", name="content")
    language: str = "text"


ContentBlock = (
    Paragraph
    | Heading
    | ListBlock
    | Image
    | Gallery
    | Callout
    | Signature
    | Divider
    | CodeBlock
)


def decode_block(payload: object) -> ContentBlock | None:
    """Convert a raw block mapping into a typed block.

    Parameters
    ----------
    payload : object
        A mapping decoded from the content store, usually a ``dict``.

    Returns
    -------
    ContentBlock | None
        The typed block, or ``None`` when the payload has an unknown ``type``
        or violates a variant invariant. Malformed blocks are logged and
        dropped so a single bad entry cannot break the surrounding document.
    """
    try:
        return msgspec.convert(_upgrade_legacy(payload), ContentBlock)
    except msgspec.ValidationError as exc:
        kind = payload.get("type") if isinstance(payload, cabc.Mapping) else None
        logger.warning("Skipping malformed content block %r: %s", kind, exc)
        return None


def _upgrade_legacy(payload: object) -> object:
    """Rewrite block shapes written by older editors into current variants."""
    if not isinstance(payload, cabc.Mapping):
        return payload
    match payload.get("type"):
        case "strong":
            text = str(payload.get("content") or "").strip()
            return {"type": "paragraph", "content": f"**{text}**" if text else ""}
        case "blockquote":
            return {"type": "callout", "content": payload.get("content") or ""}
        case "separator":
            return {"type": "divider", "style": "line"}
        case _:
            return payload


def decode_blocks(payloads: cabc.Iterable[object]) -> tuple[ContentBlock, ...]:
    """Decode ``payloads`` in order, skipping malformed entries."""
    blocks: list[ContentBlock] = []
    for payload in payloads:
        block = decode_block(payload)
        if block is not None:
            blocks.append(block)
    return tuple(blocks)


__all__ = [
    "BulletColor",
    "Callout",
    "CalloutColor",
    "CalloutItem",
    "CodeBlock",
    "ContentBlock",
    "Divider",
    "DividerStyle",
    "Gallery",
    "GalleryImage",
    "Heading",
    "Image",
    "ImageAlignment",
    "ListBlock",
    "Paragraph",
    "Signature",
    "decode_block",
    "decode_blocks",
]
