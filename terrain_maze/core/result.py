from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class RunResult:
    strategy: str
    found: bool
    visited_count: int
    path_length: int
    path_cost: int
    elapsed: float  # seconds
    path: Tuple[Tuple[int, int], ...] = field(default=(), repr=False)

    @property
    def elapsed_ms(self) -> int:
        return int(round(self.elapsed * 1000))

    def summary(self) -> str:
        return (
            f"Algorithm: {self.strategy}\n"
            f"Status: {'Found' if self.found else 'No Path'}\n"
            f"Total Cost: {self.path_cost}\n"
            f"Visited: {self.visited_count}\n"
            f"Path Len: {self.path_length}\n"
            f"Time: {self.elapsed_ms} ms"
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["path"] = [list(p) for p in self.path]
        return data
