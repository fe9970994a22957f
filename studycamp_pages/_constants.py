"""Common literal values used across studycamp_pages.

These constants keep anchor formats and content-store names centralized so
templates, the navigation layer, and tests can import the same values without
drifting. Intended for internal use within the studycamp_pages package.

Examples
--------
>>> from studycamp_pages import _constants
>>> _constants.SECTION_ANCHOR_TEMPLATE.format(id="opening")
'section-opening'
>>> _constants.COURSE_PAGE_COLLECTION
'coursePageContent'
"""

SECTION_ANCHOR_TEMPLATE = "section-{id}"

COURSE_PAGE_COLLECTION = "coursePageContent"
ESSAY_COLLECTION = "essays"

MAIN_CONTENT_SECTION_ID = "main-content"
NAV_LABEL_MAX_LENGTH = 25


def section_anchor(section_id: str) -> str:
    """Return the DOM anchor id used for ``section_id``."""
    return SECTION_ANCHOR_TEMPLATE.format(id=section_id)
