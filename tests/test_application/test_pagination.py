"""
Unit tests for the Pagination Controller state machine.
"""

from reviewharvest.application import ExhaustedReason, PaginationController, PaginationState
from reviewharvest.infrastructure.browser import SCROLL_TO_BOTTOM, TriggerStatus

from conftest import FakeNode, FakePageDriver

RECORD = ".review"


class EndlessDriver(FakePageDriver):
    """Always reports more content: every trigger adds a record."""

    def __init__(self):
        super().__init__()
        self.records = [FakeNode()]

    def query(self, locator):
        return list(self.records) if locator == RECORD else []

    def trigger(self, locator):
        self.triggered.append(locator)
        self.records.append(FakeNode())
        return TriggerStatus.TRIGGERED


def no_sleep(_):
    pass


def test_endless_page_stops_at_iteration_cap():
    driver = EndlessDriver()
    controller = PaginationController(max_iterations=8, settle_interval=0, sleep=no_sleep)

    result = controller.run(driver, RECORD, load_more=".more")

    assert result.state is PaginationState.EXHAUSTED
    assert result.reason is ExhaustedReason.ITERATION_CAP
    assert result.iterations == 8
    assert len(driver.triggered) == 8
    assert result.record_count == 9


def test_transitions_follow_state_machine():
    controller = PaginationController(max_iterations=2, settle_interval=0, sleep=no_sleep)
    result = controller.run(EndlessDriver(), RECORD, load_more=".more")

    assert result.transitions == [
        PaginationState.IDLE,
        PaginationState.TRIGGERING,
        PaginationState.SETTLING,
        PaginationState.TRIGGERING,
        PaginationState.SETTLING,
        PaginationState.EXHAUSTED,
    ]


def test_two_idle_settles_exhaust():
    driver = FakePageDriver(pages={"u": {RECORD: [FakeNode()]}})
    driver.navigate("u")
    controller = PaginationController(max_iterations=8, settle_interval=0, sleep=no_sleep)

    result = controller.run(driver, RECORD)

    assert result.reason is ExhaustedReason.NO_NEW_RECORDS
    assert result.iterations == 2
    assert driver.triggered == [SCROLL_TO_BOTTOM, SCROLL_TO_BOTTOM]


def test_no_more_marker_stops_before_triggering():
    driver = FakePageDriver(pages={"u": {RECORD: [FakeNode()], ".done": [FakeNode()], ".more": [FakeNode()]}})
    driver.navigate("u")
    controller = PaginationController(sleep=no_sleep)

    result = controller.run(driver, RECORD, load_more=".more", exhausted_marker=".done")

    assert result.reason is ExhaustedReason.NO_MORE_MARKER
    assert result.iterations == 0
    assert driver.triggered == []


def test_missing_control_exhausts():
    driver = FakePageDriver(pages={"u": {RECORD: [FakeNode()]}})
    driver.navigate("u")

    result = PaginationController(sleep=no_sleep).run(driver, RECORD, load_more=".more")

    assert result.reason is ExhaustedReason.CONTROL_MISSING
    assert result.iterations == 1


def test_target_reached_stops_early():
    controller = PaginationController(max_iterations=8, settle_interval=0, sleep=no_sleep)
    result = controller.run(EndlessDriver(), RECORD, load_more=".more", target=3)

    assert result.reason is ExhaustedReason.TARGET_REACHED
    assert result.record_count == 3
    assert result.iterations == 2


def test_settle_interval_is_used():
    waits = []
    controller = PaginationController(max_iterations=3, settle_interval=1.5, sleep=waits.append)
    controller.run(EndlessDriver(), RECORD, load_more=".more")
    assert waits == [1.5, 1.5, 1.5]
