class MazeError(Exception):
    """Base class for everything the engine raises on purpose."""


class InvalidDimensions(MazeError, ValueError):
    def __init__(self, rows: int, cols: int):
        super().__init__(f"Grid must be odd-sized and at least 3x3, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols


class EmptyGrid(MazeError, RuntimeError):
    def __init__(self):
        super().__init__("No walkable cell to place endpoints on")


class Busy(MazeError, RuntimeError):
    def __init__(self, current, requested):
        super().__init__(f"Grid is {current.name.lower()}, cannot start {requested.name.lower()}")
        self.current = current
        self.requested = requested
