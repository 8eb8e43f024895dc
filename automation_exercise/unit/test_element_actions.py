import pytest

from automation_exercise.ui_testing.framework.element_actions import (
    JS_CLICK_SCRIPT,
    ElementActions,
)
from automation_exercise.ui_testing.framework.exceptions import AlertAlreadyHandled, WaitTimeout
from automation_exercise.unit.fakes import FakeElement


@pytest.fixture
def actions(manager, wait):
    return ElementActions(manager, wait)


def test_execute_script_passes_arguments(actions, session):
    session.script_results["return arguments[0] + arguments[1];"] = 3

    assert actions.execute_script("return arguments[0] + arguments[1];", 1, 2) == 3
    assert session.scripts == [("return arguments[0] + arguments[1];", (1, 2))]


def test_wait_for_page_load_polls_ready_state(actions, session, clock):
    states = iter(["loading", "interactive", "complete"])
    session.script_results["return document.readyState"] = lambda: next(states)

    assert actions.wait_for_page_load() is True
    assert clock.now == 1.0


def test_wait_for_page_load_times_out(actions, session):
    session.script_results["return document.readyState"] = "loading"
    with pytest.raises(WaitTimeout, match="readyState"):
        actions.wait_for_page_load(timeout=1)


def test_switch_to_new_window_waits_for_popup(actions, session, clock):
    clock.at(0.5, lambda: session.windows.append("window-2"))

    assert actions.switch_to_new_window("window-1") == "window-2"
    assert session.active_window == "window-2"


def test_try_accept_alert(actions, session):
    assert actions.try_accept_alert() is False

    alert = session.open_dialog("Saved!")
    assert actions.try_accept_alert() is True
    assert alert.result == "accepted"
    assert session.dialogs == []


def test_clear_and_type(actions):
    field = FakeElement()
    actions.clear_and_type(field, "jane@example.com")
    assert field.actions == [("clear", None), ("send_keys", "jane@example.com")]


@pytest.mark.parametrize(
    "classes, expected",
    [("btn btn-Active", True), ("btn", False), (None, False)],
)
def test_has_class(actions, classes, expected):
    element = FakeElement(attributes={"class": classes} if classes else {})
    assert actions.has_class(element, "active") is expected


def test_get_trimmed_text(actions):
    assert actions.get_trimmed_text(FakeElement(text="  Blue Top \n")) == "Blue Top"


def test_click_via_javascript(actions, session):
    element = FakeElement()
    actions.click_via_javascript(element)
    assert session.scripts == [(JS_CLICK_SCRIPT, (element,))]


def test_scroll_helpers_run_scripts(actions, session):
    actions.scroll_to_bottom()
    actions.scroll_to_top()
    assert [script for script, _ in session.scripts] == [
        "window.scrollTo(0, document.body.scrollHeight);",
        "window.scrollTo(0, 0);",
    ]


def test_hover(actions):
    element = FakeElement()
    actions.hover(element)
    assert element.actions == [("hover", None)]


def test_try_accept_alert_reports_dismissed_dialog(actions, session):
    session.expect_alert(accept=False)
    session.open_dialog("Delete account?")

    with pytest.raises(AlertAlreadyHandled):
        actions.try_accept_alert()
