from .page_driver import (
    PageDriver,
    PageNode,
    NavigationStatus,
    WaitStatus,
    TriggerStatus,
    SCROLL_TO_BOTTOM,
)
