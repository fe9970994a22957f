"""Unit tests for turning authored markdown into sectioned documents."""

from __future__ import annotations

from textwrap import dedent

from studycamp_pages.content import (
    Callout,
    CalloutItem,
    CodeBlock,
    Divider,
    DocumentKind,
    Gallery,
    Heading,
    Image,
    ListBlock,
    Paragraph,
    parse_blocks,
    parse_markdown,
)

ESSAY = dedent(
    """
    # Diary of a Vibe Coder

    I expected to spend the week reading documentation.

    ## Start with the problem

    Every session started with a clear description.

    > **Describe the outcome, not the code.**
    > The model fills in the how.

    ## Let the model be wrong

    - It will invent APIs.
    - It will forget context.

    ---

    ## What's next

    ### Deploying

    Next week we deploy.
    """
)


def test_title_and_sections_are_split_at_level_two_headings() -> None:
    parsed = parse_markdown(ESSAY)
    document = parsed.document
    assert document.kind is DocumentKind.HEADING_DERIVED, (
        "expected markdown documents to be heading-derived"
    )
    assert document.title == "Diary of a Vibe Coder", (
        f"expected leading # heading as title, got {document.title!r}"
    )
    ids = [section.id for section in document.sections]
    assert ids == [
        "main-content",
        "start-with-the-problem",
        "let-the-model-be-wrong",
        "what-s-next",
    ], f"unexpected section ids {ids!r}"


def test_intro_section_has_no_label_or_heading() -> None:
    intro = parse_markdown(ESSAY).document.sections[0]
    assert intro.nav_label == "", "expected the intro section to be unlabeled"
    assert intro.content == (
        Paragraph(text="I expected to spend the week reading documentation."),
    ), f"unexpected intro blocks {intro.content!r}"


def test_heading_sections_open_with_level_two_heading() -> None:
    section = parse_markdown(ESSAY).document.sections[1]
    assert section.nav_label == "Start with the problem", "expected heading label"
    assert section.content[0] == Heading(text="Start with the problem", level=2), (
        f"expected a level-2 heading block first, got {section.content[0]!r}"
    )
    assert section.content[2] == Callout(
        content=[
            CalloutItem(kind="strong", text="Describe the outcome, not the code."),
            CalloutItem(kind="plain", text="The model fills in the how."),
        ]
    ), f"expected quote to become a callout, got {section.content[2]!r}"


def test_trailing_divider_becomes_next_section_divider_style() -> None:
    sections = parse_markdown(ESSAY).document.sections
    wrong, nxt = sections[2], sections[3]
    assert not any(isinstance(block, Divider) for block in wrong.content), (
        "expected the divider to move off the preceding section"
    )
    assert isinstance(wrong.content[-1], ListBlock), "expected the list to remain"
    assert nxt.divider_style == "line", (
        f"expected '---' to set a line divider, got {nxt.divider_style!r}"
    )


def test_deeper_headings_become_level_three_blocks() -> None:
    nxt = parse_markdown(ESSAY).document.sections[3]
    assert Heading(text="Deploying", level=3) in nxt.content, (
        f"expected ### heading as level 3 block, got {nxt.content!r}"
    )


def test_metadata_counts_words_and_collects_headings() -> None:
    metadata = parse_markdown(ESSAY).metadata
    assert metadata.headings == [
        "Diary of a Vibe Coder",
        "Start with the problem",
        "Let the model be wrong",
        "What's next",
        "Deploying",
    ], f"unexpected headings {metadata.headings!r}"
    assert metadata.word_count == 19, (
        f"expected paragraph words only, got {metadata.word_count}"
    )
    assert metadata.has_images is False, "expected no images"


def test_duplicate_headings_get_unique_ids() -> None:
    document = parse_markdown("## Notes\none\n\n## Notes\ntwo\n").document
    assert [section.id for section in document.sections] == ["notes", "notes-2"], (
        "expected numeric suffixes for repeated headings"
    )


def test_headings_inside_code_fences_do_not_split_sections() -> None:
    document = parse_markdown(
        "## Setup\n```bash\n## not a heading\necho hi\n```\n"
    ).document
    assert len(document.sections) == 1, "expected fenced headings to be ignored"
    code = document.sections[0].content[1]
    assert code == CodeBlock(text="## not a heading\necho hi", language="bash"), (
        f"unexpected code block {code!r}"
    )


def test_images_with_captions_and_galleries() -> None:
    blocks = parse_blocks(
        dedent(
            """
            ![Desk](/desk.png "right")
            *My desk*

            ![One](/1.png)
            ![Two](/2.png)
            """
        )
    )
    assert blocks[0] == Image(
        src="/desk.png", alt="Desk", caption="My desk", alignment="right"
    ), f"unexpected image {blocks[0]!r}"
    assert isinstance(blocks[1], Gallery), "expected consecutive images as gallery"
    assert [image.alt for image in blocks[1].images] == ["One", "Two"], (
        "expected gallery alt text preserved"
    )


def test_ordered_lists_and_asterisk_dividers() -> None:
    blocks = parse_blocks("1. first\n2. second\n\n***\n\n___\n")
    assert blocks[0] == ListBlock(items=["first", "second"], ordered=True), (
        f"unexpected list {blocks[0]!r}"
    )
    assert blocks[1:] == (Divider(style="asterisk"), Divider(style="dots")), (
        f"unexpected dividers {blocks[1:]!r}"
    )


def test_heading_text_keeps_trailing_hash_in_words() -> None:
    document = parse_markdown("## Learning C#\nbody\n").document
    assert document.sections[0].nav_label == "Learning C#", (
        "expected '#' inside a word to survive heading cleanup"
    )


def test_document_without_headings_has_single_unlabeled_section() -> None:
    document = parse_markdown("Just a note.\n").document
    assert [section.id for section in document.sections] == ["main-content"], (
        "expected all content in main-content"
    )
    assert document.title is None, "expected no title without a # heading"
