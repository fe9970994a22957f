"""Section navigation: extraction, scroll tracking, and jump-to-section.

The layer is presentation independent. It reads anchor positions through a
:class:`Viewport`, schedules work through a :class:`Scheduler`, and never
raises across its boundary: missing anchors are skipped and empty documents
simply produce no navigation.
"""

from .controller import NavigationController
from .debounce import Debouncer, ManualScheduler, Scheduler, TimerHandle
from .extractor import (
    NavigationExtractor,
    NavigationSection,
    extract_navigation,
    truncate_label,
)
from .navigator import SectionNavigator
from .settings import NavigationSettings
from .state import ActiveSectionState
from .tracker import ScrollTracker, select_active_section
from .viewport import ScrollRequest, StaticViewport, Viewport

__all__ = [
    "ActiveSectionState",
    "Debouncer",
    "ManualScheduler",
    "NavigationController",
    "NavigationExtractor",
    "NavigationSection",
    "NavigationSettings",
    "Scheduler",
    "ScrollRequest",
    "ScrollTracker",
    "SectionNavigator",
    "StaticViewport",
    "TimerHandle",
    "Viewport",
    "extract_navigation",
    "select_active_section",
    "truncate_label",
]
