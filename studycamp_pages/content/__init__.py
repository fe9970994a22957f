"""Sectioned content documents: typed blocks, sections, and codecs.

Documents are fetched wholesale from the content store, decoded into frozen
``msgspec`` structs, and handed to the renderer and the navigation layer.
Markdown authored essays are converted with :func:`parse_markdown`.

Examples
--------
>>> from studycamp_pages.content import DocumentKind, decode_document
>>> document = decode_document(
...     {"sections": [{"id": "intro", "navLabel": "Intro", "content": []}]},
...     default_kind=DocumentKind.EXPLICIT_LABELED,
... )
>>> document.sections[0].nav_label
'Intro'
"""

from .blocks import (
    Callout,
    CalloutItem,
    CodeBlock,
    ContentBlock,
    Divider,
    DividerStyle,
    Gallery,
    GalleryImage,
    Heading,
    Image,
    ListBlock,
    Paragraph,
    Signature,
    decode_block,
    decode_blocks,
)
from .codec import decode_document, document_to_builtins, encode_document
from .document import (
    ContentDocument,
    ContentDocumentError,
    ContentSection,
    DocumentKind,
)
from .markdown_parser import ParsedMarkdown, ParsedMetadata, parse_blocks, parse_markdown

__all__ = [
    "Callout",
    "CalloutItem",
    "CodeBlock",
    "ContentBlock",
    "ContentDocument",
    "ContentDocumentError",
    "ContentSection",
    "Divider",
    "DividerStyle",
    "DocumentKind",
    "Gallery",
    "GalleryImage",
    "Heading",
    "Image",
    "ListBlock",
    "Paragraph",
    "ParsedMarkdown",
    "ParsedMetadata",
    "Signature",
    "decode_block",
    "decode_blocks",
    "decode_document",
    "document_to_builtins",
    "encode_document",
    "parse_blocks",
    "parse_markdown",
]
