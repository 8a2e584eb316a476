# mapgen/config.py
import math
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

import structlog

log = structlog.get_logger()


@dataclass
class GenerationConfig:
    """Parameters of one dungeon generation run."""

    map_width: int = 100
    map_height: int = 100
    wall_step: int = 8
    corridor_step: int = 2
    room_size_min: float = 0.5
    room_size_max: float = 0.75
    trap_percentage: float = 10
    ladder_count: int = 10
    seed: Optional[int] = None
    # Defaults to wall_step - corridor_step - 1
    room_max_radius: Optional[float] = None

    @property
    def effective_room_max_radius(self) -> float:
        if self.room_max_radius is not None:
            return self.room_max_radius
        return self.wall_step - self.corridor_step - 1

    @property
    def room_size(self) -> float:
        """Tile budget of a full disc of ``effective_room_max_radius``."""
        return math.pi * self.effective_room_max_radius**2

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "GenerationConfig":
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            log.warning("Ignoring unknown generation settings", keys=unknown)
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def validate(self) -> "GenerationConfig":
        problems = []
        if self.map_width <= 0 or self.map_height <= 0:
            problems.append("map dimensions must be positive")
        if self.corridor_step < 1:
            problems.append("corridor_step must be at least 1")
        if self.wall_step <= self.corridor_step:
            problems.append("wall_step must be larger than corridor_step")
        if not 0 <= self.room_size_min <= self.room_size_max:
            problems.append("room size bounds must satisfy 0 <= min <= max")
        if self.effective_room_max_radius < 0:
            problems.append("room_max_radius must not be negative")
        if not 0 <= self.trap_percentage <= 100:
            problems.append("trap_percentage must be between 0 and 100")
        if self.ladder_count < 0:
            problems.append("ladder_count must not be negative")
        if problems:
            log.error("Invalid generation config", problems=problems)
            raise ValueError("; ".join(problems))
        return self


__all__ = ["GenerationConfig"]
