"""Static obstacle vertices linked into polygons."""

from __future__ import annotations

from dataclasses import dataclass, field

from .vector import Vector2


@dataclass(eq=False)
class Obstacle:
    """A vertex of a polygonal obstacle, linked to its neighbours.

    Each vertex also stands for the edge from it to the next vertex.
    Obstacles compare by identity, since the links form cycles.
    """

    point: Vector2 = field(default_factory=Vector2)
    unit_dir: Vector2 = field(default_factory=Vector2)
    is_convex: bool = False
    next_obstacle: Obstacle | None = None
    prev_obstacle: Obstacle | None = None
    id: int = 0

    def __repr__(self) -> str:
        next_id = None if self.next_obstacle is None else self.next_obstacle.id
        prev_id = None if self.prev_obstacle is None else self.prev_obstacle.id
        return (
            f"Obstacle(id={self.id}, point={self.point!s}, "
            f"unit_dir={self.unit_dir!s}, is_convex={self.is_convex}, "
            f"prev={prev_id}, next={next_id})"
        )