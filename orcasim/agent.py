"""Agents of the simulation and the computation of their new velocities."""

from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass, field
from operator import itemgetter
from typing import Any

from .linear_program import linear_program2, linear_program3
from .lines import Line
from .obstacle import Obstacle
from .vector import Vector2, abs_sq, det, dist_sq_point_line_segment, mag, sqr

_distance = itemgetter(0)


@dataclass(eq=False)
class Agent:
    """An agent in the simulation.

    ``sim`` is the owning simulator; it must provide ``kd_tree`` and
    ``time_step``. Agents compare by identity.
    """

    sim: Any
    id: int = 0
    position: Vector2 = field(default_factory=Vector2)
    velocity: Vector2 = field(default_factory=Vector2)
    pref_velocity: Vector2 = field(default_factory=Vector2)
    new_velocity: Vector2 = field(default_factory=Vector2)
    max_neighbors: int = 0
    max_speed: float = 0.0
    neighbor_dist: float = 0.0
    radius: float = 0.0
    time_horizon: float = 0.0
    time_horizon_obst: float = 0.0
    agent_neighbors: list[tuple[float, Agent]] = field(default_factory=list)
    obstacle_neighbors: list[tuple[float, Obstacle]] = field(default_factory=list)
    orca_lines: list[Line] = field(default_factory=list)

    def __repr__(self) -> str:
        return (
            f"Agent(id={self.id}, position={self.position!s}, "
            f"velocity={self.velocity!s}, radius={self.radius})"
        )

    def compute_neighbors(self) -> None:
        """Collect the obstacle and agent neighbours of this agent."""
        self.obstacle_neighbors.clear()
        range_sq = sqr(self.time_horizon_obst * self.max_speed + self.radius)
        self.sim.kd_tree.compute_obstacle_neighbors(self, range_sq)

        self.agent_neighbors.clear()
        if self.max_neighbors > 0:
            range_sq = sqr(self.neighbor_dist)
            self.sim.kd_tree.compute_agent_neighbors(self, range_sq)

    def compute_new_velocity(self) -> None:
        """Build the ORCA constraints and solve for the new velocity."""
        self.orca_lines.clear()
        num_obst_lines = 0
        inv_time_horizon = 1.0 / self.time_horizon

        for _, other in self.agent_neighbors:
            relative_position = other.position - self.position
            relative_velocity = self.velocity - other.velocity
            dist_sq = abs_sq(relative_position)
            combined_radius = self.radius + other.radius
            combined_radius_sq = sqr(combined_radius)

            if dist_sq > combined_radius_sq:
                # No collision; w runs from the cut-off centre to the relative velocity.
                w = relative_velocity - inv_time_horizon * relative_position
                w_length_sq = abs_sq(w)
                dot_product1 = w.dot(relative_position)

                if dot_product1 < 0.0 and sqr(dot_product1) > combined_radius_sq * w_length_sq:
                    # Project on the cut-off circle.
                    w_length = math.sqrt(w_length_sq)
                    unit_w = w / w_length
                    direction = Vector2(unit_w.y, -unit_w.x)
                    u = (combined_radius * inv_time_horizon - w_length) * unit_w
                else:
                    # Project on the legs.
                    leg = math.sqrt(dist_sq - combined_radius_sq)
                    px, py = relative_position
                    if det(relative_position, w) > 0.0:
                        direction = Vector2(
                            px * leg - py * combined_radius,
                            px * combined_radius + py * leg,
                        ) / dist_sq
                    else:
                        direction = -Vector2(
                            px * leg + py * combined_radius,
                            -px * combined_radius + py * leg,
                        ) / dist_sq
                    dot_product2 = relative_velocity.dot(direction)
                    u = dot_product2 * direction - relative_velocity
            else:
                # Collision: project on the cut-off circle of one time step.
                inv_time_step = 1.0 / self.sim.time_step
                w = relative_velocity - inv_time_step * relative_position
                w_length = mag(w)
                unit_w = w / w_length
                direction = Vector2(unit_w.y, -unit_w.x)
                u = (combined_radius * inv_time_step - w_length) * unit_w

            self.orca_lines.append(
                Line(
                    point=self.velocity + 0.5 * u,
                    direction=direction,
                    normal=Vector2(-direction.y, direction.x),
                )
            )

        fail, self.new_velocity = linear_program2(
            self.orca_lines, self.max_speed, self.pref_velocity, False
        )
        if fail < len(self.orca_lines):
            self.new_velocity = linear_program3(
                self.orca_lines, num_obst_lines, fail, self.max_speed, self.new_velocity
            )

    def insert_agent_neighbor(self, agent: Agent, range_sq: float) -> float:
        """Offer ``agent`` as a neighbour and return the updated squared range.

        Neighbours are kept sorted by squared distance and capped at
        ``max_neighbors``; once the list is full the range shrinks to the
        farthest kept neighbour.
        """
        if agent is self or self.max_neighbors <= 0:
            return range_sq

        dist_sq = abs_sq(self.position - agent.position)
        if dist_sq >= range_sq:
            return range_sq

        neighbors = self.agent_neighbors
        if len(neighbors) >= self.max_neighbors:
            neighbors.pop()
        index = bisect_right(neighbors, dist_sq, key=_distance)
        neighbors.insert(index, (dist_sq, agent))

        if len(neighbors) == self.max_neighbors:
            range_sq = neighbors[-1][0]
        return range_sq

    def insert_obstacle_neighbor(self, obstacle: Obstacle, range_sq: float) -> None:
        """Add the edge starting at ``obstacle`` if it lies within range."""
        next_obstacle = obstacle.next_obstacle
        dist_sq = dist_sq_point_line_segment(
            obstacle.point, next_obstacle.point, self.position
        )
        if dist_sq < range_sq:
            index = bisect_right(self.obstacle_neighbors, dist_sq, key=_distance)
            self.obstacle_neighbors.insert(index, (dist_sq, obstacle))

    def update(self) -> None:
        """Advance the position by one time step at the new velocity."""
        self.position = self.position + self.new_velocity * self.sim.time_step
        self.velocity = self.new_velocity