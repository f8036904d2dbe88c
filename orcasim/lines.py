"""Directed lines used as velocity constraints, and the simulator's error type."""

from __future__ import annotations

from dataclasses import dataclass, field

from .vector import Vector2


@dataclass(frozen=True, slots=True)
class Line:
    """A directed line.

    The half-plane to the left of the line is the region of permitted
    velocities for the constraint it describes.
    """

    point: Vector2 = field(default_factory=Vector2)
    direction: Vector2 = field(default_factory=Vector2)
    normal: Vector2 = field(default_factory=Vector2)


class SimulatorError(ValueError):
    """Raised when the simulator is asked to do something it cannot."""