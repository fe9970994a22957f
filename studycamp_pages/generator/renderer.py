"""Render content blocks to HTML fragments.

:class:`HtmlContentRenderer` turns block text (which may carry inline
markdown such as ``**bold**`` or links) into HTML and highlights code with
Pygments. :class:`BlockRenderer` dispatches over the closed block union and
applies section-level rules: empty paragraphs produce nothing and a leading
divider block can be dropped when the page already draws a separator.
"""

from __future__ import annotations

import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from studycamp_pages.content import (
    Callout,
    CodeBlock,
    Divider,
    Gallery,
    Heading,
    Image,
    ListBlock,
    Paragraph,
    Signature,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from studycamp_pages.content import ContentBlock, DividerStyle

SINGLE_PARAGRAPH_PATTERN = re.compile(r"\A<p>(.*)</p>\Z", re.DOTALL)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')

DIVIDER_MARKUP: dict[str, str] = {
    "dots": '<div class="divider divider-dots" role="separator"><span>•••</span></div>',
    "line": '<div class="divider divider-line" role="separator"><hr></div>',
    "asterisk": (
        '<div class="divider divider-asterisk" role="separator"><span>✦ ✦ ✦</span></div>'
    ),
    "none": '<div class="divider divider-none" aria-hidden="true"></div>',
}


class HtmlContentRenderer:
    """Render markdown text and code snippets with consistent styling."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        """Initialize a renderer with the Pygments style used for code.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"monokai"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str) -> str:
        """Render block-level markdown into HTML."""
        if not text.strip():
            return ""
        md = Markdown(extensions=["sane_lists"], output_format="html")
        return md.convert(text)

    def inline(self, text: str) -> str:
        """Render ``text`` as inline markdown without a wrapping ``<p>``."""
        html = self.markdown(text)
        match = SINGLE_PARAGRAPH_PATTERN.match(html)
        return match.group(1) if match else html

    def code_block(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into highlighted HTML with a language attribute.

        Parameters
        ----------
        code : str
            Source snippet to highlight.
        language : str, optional
            Pygments lexer name; defaults to ``"text"`` when not provided or
            when the lexer lookup fails.

        Returns
        -------
        str
            HTML containing the highlighted block with ``data-language``
            metadata applied.
        """
        lang = language or "text"
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        html = highlight(code, lexer, self._formatter)
        safe_lang = escape(lang, quote=True)
        return CODEHILITE_OPEN_TAG.sub(
            f'<div class="codehilite" data-language="{safe_lang}">', html, 1
        )


class BlockRenderer:
    """Render sections of content blocks to HTML."""

    def __init__(self, content: HtmlContentRenderer | None = None) -> None:
        self.content = content or HtmlContentRenderer()

    def render_blocks(
        self,
        blocks: cabc.Sequence[ContentBlock],
        *,
        drop_leading_divider: bool = False,
    ) -> str:
        """Render ``blocks`` in order and join the non-empty fragments.

        Parameters
        ----------
        blocks : Sequence[ContentBlock]
            Blocks of one section in reading order.
        drop_leading_divider : bool, optional
            Skip a ``Divider`` opening the section. Pages pass ``True``
            because they draw the separator before each section themselves
            and never draw one ahead of the first.
        """
        fragments: list[str] = []
        for index, block in enumerate(blocks):
            if drop_leading_divider and index == 0 and isinstance(block, Divider):
                continue
            html = self.render(block)
            if html:
                fragments.append(html)
        return "\n".join(fragments)

    def render(self, block: ContentBlock) -> str:  # noqa: C901, PLR0911
        """Return the HTML for a single ``block``."""
        match block:
            case Paragraph(text=text):
                return self.content.markdown(text) if text.strip() else ""
            case Heading(text=text, level=level):
                tag = "h3" if level == 2 else "h4"  # noqa: PLR2004
                return (
                    f'<{tag} class="block-heading level-{level}">'
                    f"{self.content.inline(text)}</{tag}>"
                )
            case ListBlock():
                return self._list(block)
            case Image():
                return self._image(block)
            case Gallery(images=images):
                figures = "".join(
                    self._figure(image.src, image.alt or "", image.caption)
                    for image in images
                )
                return f'<div class="gallery">{figures}</div>'
            case Callout():
                return self._callout(block)
            case Signature(name=name, title=title):
                title_html = (
                    f'<p class="signature-title">{escape(title)}</p>' if title else ""
                )
                return (
                    '<div class="signature">'
                    f'<p class="signature-name">{escape(name)}</p>{title_html}</div>'
                )
            case Divider(style=style):
                return self.divider(style)
            case CodeBlock(text=text, language=language):
                return self.content.code_block(text, language)
            case _:
                typ.assert_never(block)

    @staticmethod
    def divider(style: DividerStyle | None) -> str:
        """Return the separator drawn for ``style``; ``None`` is a plain gap."""
        return DIVIDER_MARKUP[style or "none"]

    def _list(self, block: ListBlock) -> str:
        tag = "ol" if block.ordered else "ul"
        items = "".join(
            f"<li>{self.content.inline(item)}</li>" for item in block.items
        )
        return f'<{tag} class="bullets bullets-{block.bullet_color}">{items}</{tag}>'

    def _image(self, block: Image) -> str:
        figure = self._figure(block.src, block.alt, block.caption)
        return figure.replace(
            '<figure class="image">',
            f'<figure class="image align-{block.alignment}">',
            1,
        )

    @staticmethod
    def _figure(src: str, alt: str, caption: str | None) -> str:
        caption_html = f"<figcaption>{escape(caption)}</figcaption>" if caption else ""
        return (
            '<figure class="image">'
            f'<img src="{escape(src, quote=True)}" alt="{escape(alt, quote=True)}" '
            f'loading="lazy">{caption_html}</figure>'
        )

    def _callout(self, block: Callout) -> str:
        match block.content:
            case str() as text:
                body = f"<p>{self.content.inline(text)}</p>" if text.strip() else ""
            case items:
                body = "".join(
                    f'<p class="callout-{item.kind}">'
                    + (
                        f"<strong>{self.content.inline(item.text)}</strong>"
                        if item.kind == "strong"
                        else self.content.inline(item.text)
                    )
                    + "</p>"
                    for item in items
                )
        return f'<aside class="callout callout-{block.color}">{body}</aside>'


__all__ = ["DIVIDER_MARKUP", "BlockRenderer", "HtmlContentRenderer"]
