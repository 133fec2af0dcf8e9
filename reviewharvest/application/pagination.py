"""
Pagination Controller - Bounded Lazy-Load Loop
===============================================

Reveals more records (scroll or "load more" click) until the page is
exhausted, then hands over to extraction.

    IDLE -> TRIGGERING -> SETTLING -> (TRIGGERING | EXHAUSTED)

The loop is EXHAUSTED when any of these holds:
- the iteration cap is reached (default 8)
- an explicit "no more" marker is on the page, or the control is gone
- two settles in a row added no records
- the optional target record count is reached

The cap is what guarantees termination, even against a page that keeps
claiming there is more to load.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from ..infrastructure.browser import SCROLL_TO_BOTTOM, PageDriver, TriggerStatus

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 8
IDLE_SETTLES_BEFORE_EXHAUSTED = 2


class PaginationState(Enum):
    IDLE = "idle"
    TRIGGERING = "triggering"
    SETTLING = "settling"
    EXHAUSTED = "exhausted"


class ExhaustedReason(Enum):
    ITERATION_CAP = "iteration_cap"
    NO_MORE_MARKER = "no_more_marker"
    CONTROL_MISSING = "control_missing"
    NO_NEW_RECORDS = "no_new_records"
    TARGET_REACHED = "target_reached"


@dataclass
class PaginationResult:
    state: PaginationState
    reason: ExhaustedReason
    iterations: int
    record_count: int
    transitions: List[PaginationState] = field(default_factory=list)


class PaginationController:
    """
    Usage:
        controller = PaginationController(max_iterations=8, settle_interval=2.0)
        result = controller.run(driver, ".review-unit", load_more=".btn-more")
    """

    def __init__(
        self,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        settle_interval: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.max_iterations = max(0, max_iterations)
        self.settle_interval = settle_interval
        self._sleep = sleep

    def run(
        self,
        driver: PageDriver,
        record_locator: str,
        load_more: Optional[str] = None,
        exhausted_marker: Optional[str] = None,
        target: Optional[int] = None,
    ) -> PaginationResult:
        """
        Drive the reveal-more loop.

        Args:
            driver: Page driver positioned on the page
            record_locator: Locator counting the records revealed so far
            load_more: Control to click; None scrolls to the bottom instead
            exhausted_marker: Locator whose presence means nothing is left
            target: Stop early once this many records are present
        """
        transitions = [PaginationState.IDLE]
        trigger_locator = load_more or SCROLL_TO_BOTTOM
        count = len(driver.query(record_locator))
        iterations = 0
        idle_settles = 0

        def finish(reason: ExhaustedReason) -> PaginationResult:
            transitions.append(PaginationState.EXHAUSTED)
            logger.debug(
                f"Pagination exhausted ({reason.value}) after {iterations} "
                f"iterations with {count} records"
            )
            return PaginationResult(
                state=PaginationState.EXHAUSTED,
                reason=reason,
                iterations=iterations,
                record_count=count,
                transitions=transitions,
            )

        while True:
            if target is not None and count >= target:
                return finish(ExhaustedReason.TARGET_REACHED)
            if iterations >= self.max_iterations:
                return finish(ExhaustedReason.ITERATION_CAP)
            if exhausted_marker and driver.query(exhausted_marker):
                return finish(ExhaustedReason.NO_MORE_MARKER)

            transitions.append(PaginationState.TRIGGERING)
            iterations += 1
            if driver.trigger(trigger_locator) is TriggerStatus.NOT_FOUND:
                return finish(ExhaustedReason.CONTROL_MISSING)

            transitions.append(PaginationState.SETTLING)
            self._sleep(self.settle_interval)

            new_count = len(driver.query(record_locator))
            if new_count > count:
                idle_settles = 0
            else:
                idle_settles += 1
            count = new_count

            if idle_settles >= IDLE_SETTLES_BEFORE_EXHAUSTED:
                return finish(ExhaustedReason.NO_NEW_RECORDS)
