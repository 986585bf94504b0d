import time
from typing import Callable, List, NamedTuple, Optional, Tuple

# Event Types
EVT_CARVE = 0x01     # generator opened a cell
EVT_SETTLE = 0x02    # search settled a cell
EVT_PATH_ADD = 0x03  # path reconstruction marked a cell

EVENT_NAMES = {
    EVT_CARVE: "carve",
    EVT_SETTLE: "settle",
    EVT_PATH_ADD: "path",
}


class StepEvent(NamedTuple):
    kind: int
    row: int
    col: int

    @property
    def coord(self) -> Tuple[int, int]:
        return (self.row, self.col)

    def __repr__(self):
        return f"StepEvent({EVENT_NAMES.get(self.kind, self.kind)}, {self.row}, {self.col})"


# A listener is any callable taking one StepEvent. It is called synchronously
# from the algorithm's thread and must not mutate the grid.
StepListener = Callable[[StepEvent], None]


def emit(listener: Optional[StepListener], event: StepEvent):
    if listener is not None:
        listener(event)


class StepRecorder:
    """Keeps every event in memory. Handy for headless runs and tests."""

    def __init__(self):
        self.events: List[StepEvent] = []

    def __call__(self, event: StepEvent):
        self.events.append(event)

    def of_kind(self, kind: int) -> List[StepEvent]:
        return [e for e in self.events if e.kind == kind]

    def coords(self, kind: int) -> List[Tuple[int, int]]:
        return [e.coord for e in self.events if e.kind == kind]

    def clear(self):
        self.events.clear()

    def __len__(self):
        return len(self.events)


class PacedListener:
    """
    Slows a run down so a display can keep up.
    Sleeps after each event, then forwards it to `inner` (if any).
    """

    def __init__(self, inner: Optional[StepListener] = None, delay: float = 0.010, path_delay: float = 0.005):
        self.inner = inner
        self.delay = delay
        self.path_delay = path_delay

    def __call__(self, event: StepEvent):
        emit(self.inner, event)
        pause = self.path_delay if event.kind == EVT_PATH_ADD else self.delay
        if pause > 0:
            time.sleep(pause)
