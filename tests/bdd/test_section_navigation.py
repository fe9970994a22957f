"""Behaviour tests for scroll tracking and jump-to-section navigation.

The scenarios in ``section_navigation.feature`` drive a
:class:`~studycamp_pages.navigation.SectionNavigator` against a
``StaticViewport`` and a ``ManualScheduler`` so scrolling and debounce
timing are fully deterministic.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from studycamp_pages.content import ContentDocument, DocumentKind, decode_document
from studycamp_pages.navigation import (
    ManualScheduler,
    ScrollRequest,
    SectionNavigator,
    StaticViewport,
)

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "section_navigation.feature"
)
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _navigator(scenario_state: dict[str, object]) -> SectionNavigator:
    return typ.cast("SectionNavigator", scenario_state["navigator"])


def _viewport(scenario_state: dict[str, object]) -> StaticViewport:
    return typ.cast("StaticViewport", scenario_state["viewport"])


@given(parsers.parse('a course letter with sections "{first}" and "{second}"'))
def given_letter(scenario_state: dict[str, object], first: str, second: str) -> None:
    """Store an explicit-labeled document with two sections."""
    scenario_state["document"] = decode_document(
        {
            "sections": [
                {"id": first, "navLabel": first.title()},
                {"id": second, "navLabel": second.title()},
            ]
        },
        default_kind=DocumentKind.EXPLICIT_LABELED,
    )


@given(
    parsers.parse(
        "the details section starts {offset:d} pixels down a desktop viewport"
    )
)
def given_desktop_layout(scenario_state: dict[str, object], offset: int) -> None:
    scenario_state["viewport"] = StaticViewport(
        {"section-intro": 0, "section-details": offset}, width=1280, height=800
    )


@given("only the intro section is rendered")
def given_partial_layout(scenario_state: dict[str, object]) -> None:
    scenario_state["viewport"] = StaticViewport({"section-intro": 0})


@when("the navigator attaches")
def when_attach(scenario_state: dict[str, object]) -> None:
    """Attach the navigator and let the initial recomputation run."""
    scheduler = ManualScheduler()
    navigator = SectionNavigator(
        typ.cast("ContentDocument", scenario_state["document"]),
        _viewport(scenario_state),
        scheduler=scheduler,
    )
    navigator.attach()
    scheduler.advance(navigator.settings.initial_delay_seconds)
    scenario_state["scheduler"] = scheduler
    scenario_state["navigator"] = navigator


@when("the navigator detaches")
def when_detach(scenario_state: dict[str, object]) -> None:
    _navigator(scenario_state).detach()


@when(parsers.parse("the reader scrolls to {scroll_y:d}"))
def when_scroll(scenario_state: dict[str, object], scroll_y: int) -> None:
    _viewport(scenario_state).scroll(scroll_y)


@when("the debounce period elapses")
def when_debounce_elapses(scenario_state: dict[str, object]) -> None:
    scheduler = typ.cast("ManualScheduler", scenario_state["scheduler"])
    scheduler.advance(_navigator(scenario_state).settings.debounce_seconds)


@when(parsers.parse('the reader selects "{section_id}"'))
def when_select(scenario_state: dict[str, object], section_id: str) -> None:
    _navigator(scenario_state).navigate_to(section_id)


@then(parsers.parse('the active section is "{section_id}"'))
def then_active(scenario_state: dict[str, object], section_id: str) -> None:
    current = _navigator(scenario_state).current_section_id
    assert current == section_id, f"expected {section_id!r} active, got {current!r}"


@then(parsers.parse("a smooth scroll to {top:d} is requested"))
def then_scroll_requested(scenario_state: dict[str, object], top: int) -> None:
    requests = _viewport(scenario_state).scroll_requests
    assert requests == [ScrollRequest(top=float(top), smooth=True)], (
        f"unexpected scroll requests {requests!r}"
    )


@then("no scroll is requested")
def then_no_scroll(scenario_state: dict[str, object]) -> None:
    requests = _viewport(scenario_state).scroll_requests
    assert requests == [], f"expected no scroll requests, got {requests!r}"
