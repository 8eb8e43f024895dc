import pytest

from automation_exercise.ui_testing.framework.exceptions import (
    SessionStateError,
    SessionUnavailable,
    WaitTimeout,
)
from automation_exercise.ui_testing.framework.session_manager import DriverManager
from automation_exercise.ui_testing.framework.wait_helper import (
    PollKind,
    WaitHelper,
    WaitRequest,
    poll_once,
)
from automation_exercise.unit.fakes import FakeElement


# =============================================================================
# Polling loop
# =============================================================================

def test_condition_succeeds_on_kth_poll(wait, clock):
    calls = []

    def ready_on_fourth_poll(session):
        calls.append(clock.now)
        return "done" if len(calls) == 4 else None

    assert wait.until_condition(ready_on_fourth_poll, timeout=5) == "done"
    assert calls == [0.0, 0.5, 1.0, 1.5]
    assert clock.now == 1.5


def test_never_true_condition_times_out_with_bounded_overshoot(wait, clock):
    with pytest.raises(WaitTimeout) as exc_info:
        wait.until_condition(lambda session: False, timeout=2.0, description="the impossible")

    error = exc_info.value
    assert 2.0 <= error.elapsed < 2.0 + wait.poll_interval
    assert error.timeout == 2.0
    assert error.description == "the impossible"
    assert "the impossible" in str(error)


def test_last_sleep_is_clamped_to_deadline(wait, clock):
    with pytest.raises(WaitTimeout) as exc_info:
        wait.until_condition(lambda session: None, timeout=1.2)

    assert clock.sleeps == [0.5, 0.5, pytest.approx(0.2)]
    assert exc_info.value.elapsed == pytest.approx(1.2)


def test_default_timeout_comes_from_settings(wait, clock):
    # settings fixture: explicit_wait=2.0
    with pytest.raises(WaitTimeout) as exc_info:
        wait.until_exists("#never")

    assert exc_info.value.timeout == 2.0
    assert isinstance(exc_info.value.last_error, Exception)


def test_zero_timeout_polls_once(wait, clock, session):
    with pytest.raises(WaitTimeout):
        wait.until_exists("#missing", timeout=0)

    assert session.find_calls == ["#missing"]
    assert clock.sleeps == []


def test_empty_result_means_retry(wait, clock):
    results = iter([[], {}, "", ["ok"]])
    assert wait.until_condition(lambda session: next(results), timeout=5) == ["ok"]
    assert clock.now == 1.5


def test_non_transient_error_propagates_without_retry(wait, clock, session):
    session.unavailable = True

    with pytest.raises(SessionUnavailable):
        wait.until_visible("#anything")

    assert clock.sleeps == []


def test_extra_ignored_exceptions_are_retried(wait, clock):
    attempts = []

    def flaky(session):
        attempts.append(1)
        if len(attempts) < 3:
            raise ValueError("not parsed yet")
        return 42

    assert wait.until_condition(flaky, timeout=5, ignored_exceptions=[ValueError]) == 42
    assert len(attempts) == 3


def test_unlisted_exception_is_fatal(wait, clock):
    def broken(session):
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        wait.until_condition(broken, timeout=5)
    assert clock.sleeps == []


def test_session_is_fetched_on_every_poll(session, clock):
    provided = []

    def provider():
        provided.append(session)
        return session

    wait = WaitHelper(provider, default_timeout=1.0, clock=clock, sleep=clock.sleep)
    with pytest.raises(WaitTimeout):
        wait.until_exists("#missing")

    assert len(provided) == len(session.find_calls) == 3


def test_wait_on_uninitialized_manager_fails_loudly(settings, backend, clock):
    manager = DriverManager(settings, backend=backend)
    wait = WaitHelper.from_manager(manager, clock=clock, sleep=clock.sleep)

    with pytest.raises(SessionStateError):
        wait.until_title_contains("anything")
    assert clock.sleeps == []


# =============================================================================
# Element conditions
# =============================================================================

def test_element_becoming_visible_at_1300ms_is_seen_on_1500ms_poll(wait, clock, session):
    # timeout 2000ms, interval 500ms, visible at 1300ms
    (element,) = session.add("#banner", FakeElement(visible=False))
    clock.at(1.3, lambda: setattr(element, "visible", True))

    assert wait.until_visible("#banner", timeout=2.0) is element
    assert clock.now == 1.5
    assert len(session.find_calls) == 4


def test_until_visible_refetches_element_each_poll(wait, clock, session):
    session.add("#item", FakeElement(visible=False))
    fresh = FakeElement(visible=True)
    clock.at(0.5, lambda: session.add("#item", fresh))

    assert wait.until_visible("#item") is fresh


def test_stale_reference_does_not_end_the_wait(wait, clock, session):
    (stale,) = session.add("#row", FakeElement())
    stale.stale = True
    replacement = FakeElement()
    clock.at(0.5, lambda: session.add("#row", replacement))

    assert wait.until_visible("#row") is replacement
    assert clock.now == 0.5


def test_until_all_visible_requires_every_match(wait, clock, session):
    first, second = session.add("li", FakeElement(), FakeElement(visible=False))
    clock.at(1.0, lambda: setattr(second, "visible", True))

    assert wait.until_all_visible("li") == [first, second]
    assert clock.now == 1.0


def test_until_all_visible_times_out_on_no_matches(wait, clock):
    with pytest.raises(WaitTimeout, match="visibility of all 'li'"):
        wait.until_all_visible("li", timeout=1)


def test_until_not_visible_absent_element_succeeds_immediately(wait, clock):
    assert wait.until_not_visible("#spinner") is True
    assert clock.sleeps == []


def test_until_not_visible_stale_element_succeeds(wait, clock, session):
    (element,) = session.add("#spinner", FakeElement())
    element.stale = True

    assert wait.until_not_visible("#spinner") is True
    assert clock.sleeps == []


def test_until_not_visible_waits_for_removal(wait, clock, session):
    session.add("#spinner", FakeElement())
    clock.at(1.0, lambda: session.remove("#spinner"))

    assert wait.until_not_visible("#spinner") is True
    assert clock.now == 1.0


def test_until_not_visible_hidden_element_succeeds(wait, clock, session):
    session.add("#toast", FakeElement(visible=False))
    assert wait.until_not_visible("#toast") is True


def test_until_clickable_waits_for_enabled(wait, clock, session):
    (button,) = session.add("button", FakeElement(enabled=False))
    clock.at(0.5, lambda: setattr(button, "enabled", True))

    assert wait.until_clickable("button") is button
    assert clock.now == 0.5


def test_until_clickable_hidden_element_times_out(wait, session):
    session.add("button", FakeElement(visible=False))
    with pytest.raises(WaitTimeout, match="clickability of 'button'"):
        wait.until_clickable("button", timeout=1)


def test_until_exists_ignores_visibility(wait, session):
    (hidden,) = session.add("input[type=hidden]", FakeElement(visible=False))
    assert wait.until_exists("input[type=hidden]") is hidden


# =============================================================================
# Text / URL / title
# =============================================================================

def test_until_text_present_matches_case_insensitive_substring(wait, clock, session):
    (status,) = session.add("#status", FakeElement(text=""))
    clock.at(0.8, lambda: setattr(status, "text", "Operation Success"))

    assert wait.until_text_present("#status", "Success", timeout=5.0) is True
    assert clock.now == 1.0


def test_until_text_present_retries_stale_reads(wait, clock, session):
    (status,) = session.add("#status", FakeElement(text="operation SUCCESS"))
    status.stale = True
    clock.at(0.5, lambda: setattr(status, "stale", False))

    assert wait.until_text_present("#status", "success") is True
    assert clock.now == 0.5


def test_until_text_present_times_out_on_wrong_text(wait, session):
    session.add("#status", FakeElement(text="Pending"))
    with pytest.raises(WaitTimeout, match="text 'Done'"):
        wait.until_text_present("#status", "Done", timeout=1)


def test_until_url_contains_is_case_insensitive(wait, clock, session):
    clock.at(0.5, lambda: setattr(session, "url", "https://shop.example.com/Account/Login"))
    assert wait.until_url_contains("/account/") is True


def test_until_title_contains_is_case_insensitive(wait, session):
    session.page_title = "Automation Exercise - Products"
    assert wait.until_title_contains("PRODUCTS") is True


# =============================================================================
# Frames / alerts
# =============================================================================

def test_until_frame_available_switches_into_frame(wait, clock, session):
    (frame_element,) = session.add("iframe#payment", FakeElement(frame=None))
    clock.at(1.0, lambda: setattr(frame_element, "frame", "payment"))

    assert wait.until_frame_available("iframe#payment") is session
    assert session.frame_scope == "payment"
    assert clock.now == 1.0


def test_until_frame_available_missing_frame_times_out(wait, session):
    with pytest.raises(WaitTimeout, match="frame 'iframe#ads'"):
        wait.until_frame_available("iframe#ads", timeout=1)
    assert session.frame_scope is None


def test_until_alert_present_waits_for_dialog(wait, clock, session):
    clock.at(1.5, lambda: session.open_dialog("Are you sure?"))

    alert = wait.until_alert_present()
    assert alert.text == "Are you sure?"
    assert clock.now == 1.5


def test_until_alert_present_times_out(wait):
    with pytest.raises(WaitTimeout, match="alert to be present"):
        wait.until_alert_present(timeout=0.5)


# =============================================================================
# Building blocks
# =============================================================================

def test_poll_once_classifies_outcomes(session):
    def provider():
        return session

    def missing(s):
        return s.find_one("#missing")

    def crash(s):
        raise RuntimeError("crash")

    assert poll_once(WaitRequest(lambda s: "v", "value"), provider).kind is PollKind.SUCCESS
    assert poll_once(WaitRequest(lambda s: None, "none"), provider).kind is PollKind.RETRY
    assert poll_once(WaitRequest(missing, "missing"), provider).kind is PollKind.RETRY

    fatal = poll_once(WaitRequest(crash, "crash"), provider)
    assert fatal.kind is PollKind.FATAL
    assert isinstance(fatal.error, RuntimeError)


@pytest.mark.parametrize("kwargs", [{"timeout": -1}, {"poll_interval": 0}])
def test_wait_request_rejects_invalid_timing(kwargs):
    with pytest.raises(ValueError):
        WaitRequest(lambda s: True, "invalid", **kwargs)


def test_timeout_is_logged(wait, log_messages):
    with pytest.raises(WaitTimeout):
        wait.until_exists("#ghost", timeout=0.5)

    assert any("Timed out" in message and "#ghost" in message for message in log_messages)
