"""Default and per-agent parameters of the simulation."""

from __future__ import annotations

from dataclasses import dataclass, field

from .vector import Vector2


@dataclass(frozen=True, slots=True)
class AgentParams:
    """The parameters that describe how an agent navigates.

    ``neighbor_dist``: the maximum centre-to-centre distance to other agents
    taken into account. Must be non-negative.
    ``max_neighbors``: the maximum number of other agents taken into account.
    ``time_horizon``: the time for which computed velocities are safe with
    respect to other agents. Must be positive.
    ``time_horizon_obst``: the same with respect to obstacles. Must be positive.
    ``radius``: the radius of the agent. Must be non-negative.
    ``max_speed``: the maximum speed of the agent. Must be non-negative.
    ``velocity``: the initial velocity of the agent.
    """

    neighbor_dist: float
    max_neighbors: int
    time_horizon: float
    time_horizon_obst: float
    radius: float
    max_speed: float
    velocity: Vector2 = field(default_factory=Vector2)