# Roo Client Concurrency Tests
#
# Tests for:
# - Stale responses never overwrite newer state
# - Failed fetches keep the last good list on screen
# - Debounced search-as-you-type
#
# Slow fetches are held open with threading.Event, never with sleeps.

import threading
import time

import pytest

from roo_client.errors import ApiError, TransportError
from roo_client.models import Driver
from roo_client.services.concurrency import Debouncer, ListController, RequestSequencer
from roo_client.services.filter_service import FilterState
from tests.conftest import CONFIG

NORTH = Driver(user_id="1", username="n", full_name="North Driver", area="North")
SOUTH = Driver(user_id="2", username="s", full_name="South Driver", area="South", is_active=False)


class TestRequestSequencer:

    @pytest.mark.concurrent
    def test_only_newest_is_current(self):
        seq = RequestSequencer()
        first = seq.begin()
        second = seq.begin()

        assert second > first
        assert seq.is_current(second)
        assert not seq.is_current(first)
        assert seq.latest == second


class TestStaleResponses:

    @pytest.mark.smoke
    @pytest.mark.concurrent
    def test_slow_first_fetch_does_not_overwrite_second(self):
        """
        SCENARIO: Fetch #1 (slow) starts, fetch #2 (fast) starts and completes,
                  then #1 resolves
        EXPECTED: Visible state still reflects #2
        """
        slow_started = threading.Event()
        release_slow = threading.Event()

        def fetch(state):
            if state.query == "slow":
                slow_started.set()
                release_slow.wait(CONFIG.wait_timeout)
                return [SOUTH]
            return [NORTH]

        with ListController(fetch) as controller:
            slow = controller.submit(FilterState(query="slow"))
            assert slow_started.wait(CONFIG.wait_timeout)

            assert controller.refresh(FilterState(query="")) is True
            release_slow.set()

            assert slow.result(timeout=CONFIG.wait_timeout) is False
            assert controller.records == [NORTH]
            assert controller.visible == [NORTH]
            assert controller.state == FilterState(query="")

    @pytest.mark.concurrent
    def test_superseded_failure_is_ignored(self):
        slow_started = threading.Event()
        release_slow = threading.Event()

        def fetch(state):
            if state.query == "slow":
                slow_started.set()
                release_slow.wait(CONFIG.wait_timeout)
                raise TransportError("connection reset")
            return [NORTH, SOUTH]

        with ListController(fetch) as controller:
            slow = controller.submit(FilterState(query="slow"))
            assert slow_started.wait(CONFIG.wait_timeout)
            controller.refresh(FilterState())
            release_slow.set()

            assert slow.result(timeout=CONFIG.wait_timeout) is False
            assert controller.records == [NORTH, SOUTH]


class TestFailures:

    @pytest.mark.concurrent
    def test_failed_refresh_keeps_last_good_records(self):
        """
        SCENARIO: A list loads, then a refresh fails with HTTP 500
        EXPECTED: Error propagates; previously committed list stays visible
        """
        responses = [[NORTH, SOUTH], ApiError(500, "Failed to fetch drivers")]

        def fetch(state):
            result = responses.pop(0)
            if isinstance(result, Exception):
                raise result
            return result

        with ListController(fetch) as controller:
            controller.refresh(FilterState())
            committed = controller.committed_token

            with pytest.raises(ApiError):
                controller.refresh(FilterState(status="active"))

            assert controller.records == [NORTH, SOUTH]
            assert controller.state == FilterState()
            assert controller.committed_token == committed


class TestLocalRefinement:

    @pytest.mark.concurrent
    def test_commit_applies_client_side_filter(self):
        commits = []
        with ListController(lambda state: [NORTH, SOUTH], on_commit=commits.append) as controller:
            controller.refresh(FilterState(status="inactive"))
            assert controller.visible == [SOUTH]

            assert controller.apply_filter(FilterState(query="north")) == [NORTH]
            assert controller.records == [NORTH, SOUTH]
            assert commits == [[SOUTH], [NORTH]]


class TestDebounce:

    @pytest.mark.concurrent
    def test_burst_fires_once_with_last_arguments(self):
        calls = []
        fired = threading.Event()

        def func(value):
            calls.append(value)
            fired.set()

        debouncer = Debouncer(func, delay=CONFIG.debounce_seconds)
        for value in ("g", "gi", "gin"):
            debouncer.trigger(value)

        assert fired.wait(CONFIG.wait_timeout)
        time.sleep(CONFIG.debounce_seconds * 4)
        assert calls == ["gin"]
        assert not debouncer.pending

    @pytest.mark.concurrent
    def test_cancel(self):
        calls = []
        debouncer = Debouncer(calls.append, delay=CONFIG.debounce_seconds)
        debouncer.trigger("x")
        debouncer.cancel()

        time.sleep(CONFIG.debounce_seconds * 4)
        assert calls == []

    @pytest.mark.concurrent
    def test_schedule_refresh_fetches_once(self):
        """
        SCENARIO: User types three characters quickly
        EXPECTED: One fetch, for the final query
        """
        fetched = []
        committed = threading.Event()

        def fetch(state):
            fetched.append(state.query)
            return [NORTH, SOUTH]

        with ListController(
            fetch,
            on_commit=lambda visible: committed.set(),
            debounce=CONFIG.debounce_seconds,
        ) as controller:
            for query in ("s", "so", "sou"):
                controller.schedule_refresh(FilterState(query=query))

            assert committed.wait(CONFIG.wait_timeout)
            assert fetched == ["sou"]
            assert controller.visible == [SOUTH]

    @pytest.mark.concurrent
    def test_timer_from_before_cancel_does_nothing(self):
        """
        SCENARIO: A timer already past its delay reaches _fire after cancel()
        EXPECTED: The callback never runs
        """
        calls = []
        debouncer = Debouncer(calls.append, delay=CONFIG.wait_timeout)
        debouncer.trigger("x")
        generation = debouncer._generation
        debouncer.cancel()

        debouncer._fire(generation, ("x",), {})
        assert calls == []

    @pytest.mark.concurrent
    def test_late_debounced_refresh_after_close(self):
        """
        SCENARIO: Debounced refresh fires after the controller was closed
        EXPECTED: Dropped quietly; no fetch and no RuntimeError from the executor
        """
        fetched = []
        controller = ListController(lambda state: fetched.append(state) or [], debounce=CONFIG.wait_timeout)
        controller.close()

        assert controller._submit_if_open(FilterState(query="late")) is None
        assert fetched == []
