"""k-d trees over the agents and the static obstacles of a simulation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .agent import Agent
from .obstacle import Obstacle
from .vector import RVO_EPSILON, Vector2, abs_sq, det, left_of, sqr

MAX_LEAF_SIZE = 10
"""The largest number of agents kept in a leaf of the agent tree."""


@dataclass(slots=True)
class _AgentTreeNode:
    begin: int = 0
    end: int = 0
    left: int = 0
    right: int = 0
    min_x: float = 0.0
    max_x: float = 0.0
    min_y: float = 0.0
    max_y: float = 0.0

    def dist_sq(self, point: Vector2) -> float:
        """Return the squared distance from ``point`` to this node's box."""
        return (
            sqr(max(0.0, self.min_x - point.x))
            + sqr(max(0.0, point.x - self.max_x))
            + sqr(max(0.0, self.min_y - point.y))
            + sqr(max(0.0, point.y - self.max_y))
        )


@dataclass(eq=False, slots=True)
class _ObstacleTreeNode:
    obstacle: Obstacle
    left: _ObstacleTreeNode | None = None
    right: _ObstacleTreeNode | None = None


def _split_sides(split: Obstacle, other: Obstacle) -> tuple[float, float]:
    """Return how far the ends of edge ``other`` lie left of edge ``split``."""
    i1, i2 = split.point, split.next_obstacle.point
    return (
        left_of(i1, i2, other.point),
        left_of(i1, i2, other.next_obstacle.point),
    )


class KdTree:
    """Spatial indexes for the agents and obstacles of a simulator.

    ``sim`` must provide the lists ``agents`` and ``obstacles``; building the
    obstacle tree may split obstacle edges and append the new vertices to
    ``sim.obstacles``.
    """

    def __init__(self, sim: Any) -> None:
        self.sim = sim
        self._agents: list[Agent] = []
        self._agent_tree: list[_AgentTreeNode] = []
        self._obstacle_tree: _ObstacleTreeNode | None = None

    # Agent tree -----------------------------------------------------------

    def build_agent_tree(self) -> None:
        """Rebuild the agent tree, taking in agents added since the last build."""
        sim_agents = self.sim.agents
        if len(self._agents) < len(sim_agents):
            self._agents.extend(sim_agents[len(self._agents):])
            self._agent_tree = [
                _AgentTreeNode() for _ in range(2 * len(self._agents) - 1)
            ]

        if self._agents:
            self._build_agent_tree_recursive(0, len(self._agents), 0)

    def _build_agent_tree_recursive(self, begin: int, end: int, node_no: int) -> None:
        agents = self._agents
        node = self._agent_tree[node_no]
        node.begin = begin
        node.end = end

        xs = [agent.position.x for agent in agents[begin:end]]
        ys = [agent.position.y for agent in agents[begin:end]]
        node.min_x, node.max_x = min(xs), max(xs)
        node.min_y, node.max_y = min(ys), max(ys)

        if end - begin <= MAX_LEAF_SIZE:
            return

        is_vertical = node.max_x - node.min_x > node.max_y - node.min_y
        if is_vertical:
            split_value = 0.5 * (node.max_x + node.min_x)

            def coord(agent: Agent) -> float:
                return agent.position.x
        else:
            split_value = 0.5 * (node.max_y + node.min_y)

            def coord(agent: Agent) -> float:
                return agent.position.y

        left, right = begin, end
        while left < right:
            while left < right and coord(agents[left]) < split_value:
                left += 1
            while right > left and coord(agents[right - 1]) >= split_value:
                right -= 1
            if left < right:
                agents[left], agents[right - 1] = agents[right - 1], agents[left]
                left += 1
                right -= 1

        if left == begin:
            left += 1
            right += 1

        node.left = node_no + 1
        node.right = node_no + 2 * (left - begin)

        self._build_agent_tree_recursive(begin, left, node.left)
        self._build_agent_tree_recursive(left, end, node.right)

    def compute_agent_neighbors(self, agent: Agent, range_sq: float) -> float:
        """Offer every agent in range to ``agent`` and return the final range."""
        if not self._agent_tree:
            return range_sq
        return self._query_agent_tree_recursive(agent, range_sq, 0)

    def _query_agent_tree_recursive(
        self, agent: Agent, range_sq: float, node_no: int
    ) -> float:
        node = self._agent_tree[node_no]

        if node.end - node.begin <= MAX_LEAF_SIZE:
            for other in self._agents[node.begin:node.end]:
                range_sq = agent.insert_agent_neighbor(other, range_sq)
            return range_sq

        left = self._agent_tree[node.left]
        right = self._agent_tree[node.right]
        dist_sq_left = left.dist_sq(agent.position)
        dist_sq_right = right.dist_sq(agent.position)

        if dist_sq_left < dist_sq_right:
            near, near_dist, far, far_dist = node.left, dist_sq_left, node.right, dist_sq_right
        else:
            near, near_dist, far, far_dist = node.right, dist_sq_right, node.left, dist_sq_left

        if near_dist < range_sq:
            range_sq = self._query_agent_tree_recursive(agent, range_sq, near)
            if far_dist < range_sq:
                range_sq = self._query_agent_tree_recursive(agent, range_sq, far)
        return range_sq

    # Obstacle tree --------------------------------------------------------

    def build_obstacle_tree(self) -> None:
        """Rebuild the obstacle tree from the simulator's obstacles."""
        self._obstacle_tree = self._build_obstacle_tree_recursive(
            list(self.sim.obstacles)
        )

    def _build_obstacle_tree_recursive(
        self, obstacles: list[Obstacle]
    ) -> _ObstacleTreeNode | None:
        if not obstacles:
            return None

        count = len(obstacles)
        optimal_split = 0
        min_left = count
        min_right = count

        for i, obstacle_i in enumerate(obstacles):
            left_size = 0
            right_size = 0
            best = (max(min_left, min_right), min(min_left, min_right))

            for j, obstacle_j in enumerate(obstacles):
                if i == j:
                    continue
                j1_left, j2_left = _split_sides(obstacle_i, obstacle_j)
                if j1_left >= -RVO_EPSILON and j2_left >= -RVO_EPSILON:
                    left_size += 1
                elif j1_left <= RVO_EPSILON and j2_left <= RVO_EPSILON:
                    right_size += 1
                else:
                    left_size += 1
                    right_size += 1

                if (max(left_size, right_size), min(left_size, right_size)) >= best:
                    break

            if (max(left_size, right_size), min(left_size, right_size)) < best:
                min_left = left_size
                min_right = right_size
                optimal_split = i

        obstacle_i1 = obstacles[optimal_split]
        obstacle_i2 = obstacle_i1.next_obstacle
        left_obstacles: list[Obstacle] = []
        right_obstacles: list[Obstacle] = []

        for j, obstacle_j1 in enumerate(obstacles):
            if j == optimal_split:
                continue
            obstacle_j2 = obstacle_j1.next_obstacle
            j1_left, j2_left = _split_sides(obstacle_i1, obstacle_j1)

            if j1_left >= -RVO_EPSILON and j2_left >= -RVO_EPSILON:
                left_obstacles.append(obstacle_j1)
            elif j1_left <= RVO_EPSILON and j2_left <= RVO_EPSILON:
                right_obstacles.append(obstacle_j1)
            else:
                # The split line crosses edge j; cut it in two.
                edge_i = obstacle_i2.point - obstacle_i1.point
                t = det(edge_i, obstacle_j1.point - obstacle_i1.point) / det(
                    edge_i, obstacle_j1.point - obstacle_j2.point
                )
                split_point = obstacle_j1.point + t * (
                    obstacle_j2.point - obstacle_j1.point
                )

                new_obstacle = Obstacle(
                    point=split_point,
                    unit_dir=obstacle_j1.unit_dir,
                    is_convex=True,
                    next_obstacle=obstacle_j2,
                    prev_obstacle=obstacle_j1,
                    id=len(self.sim.obstacles),
                )
                self.sim.obstacles.append(new_obstacle)
                obstacle_j1.next_obstacle = new_obstacle
                obstacle_j2.prev_obstacle = new_obstacle

                if j1_left > 0.0:
                    left_obstacles.append(obstacle_j1)
                    right_obstacles.append(new_obstacle)
                else:
                    right_obstacles.append(obstacle_j1)
                    left_obstacles.append(new_obstacle)

        return _ObstacleTreeNode(
            obstacle=obstacle_i1,
            left=self._build_obstacle_tree_recursive(left_obstacles),
            right=self._build_obstacle_tree_recursive(right_obstacles),
        )

    def compute_obstacle_neighbors(self, agent: Agent, range_sq: float) -> None:
        """Offer every obstacle edge in range to ``agent``."""
        self._query_obstacle_tree_recursive(agent, range_sq, self._obstacle_tree)

    def _query_obstacle_tree_recursive(
        self, agent: Agent, range_sq: float, node: _ObstacleTreeNode | None
    ) -> None:
        if node is None:
            return

        obstacle1 = node.obstacle
        obstacle2 = obstacle1.next_obstacle
        agent_left_of_line = left_of(obstacle1.point, obstacle2.point, agent.position)

        near, far = (
            (node.left, node.right) if agent_left_of_line >= 0.0 else (node.right, node.left)
        )
        self._query_obstacle_tree_recursive(agent, range_sq, near)

        dist_sq_line = sqr(agent_left_of_line) / abs_sq(obstacle2.point - obstacle1.point)
        if dist_sq_line < range_sq:
            if agent_left_of_line < 0.0:
                # Only an agent on the right side can see this edge.
                agent.insert_obstacle_neighbor(obstacle1, range_sq)
            self._query_obstacle_tree_recursive(agent, range_sq, far)

    def query_visibility(self, q1: Vector2, q2: Vector2, radius: float) -> bool:
        """Return whether ``q1`` and ``q2`` see each other with clearance ``radius``."""
        return self._query_visibility_recursive(q1, q2, radius, self._obstacle_tree)

    def _query_visibility_recursive(
        self, q1: Vector2, q2: Vector2, radius: float, node: _ObstacleTreeNode | None
    ) -> bool:
        if node is None:
            return True

        obstacle1 = node.obstacle
        obstacle2 = obstacle1.next_obstacle
        q1_left = left_of(obstacle1.point, obstacle2.point, q1)
        q2_left = left_of(obstacle1.point, obstacle2.point, q2)
        inv_length_i = 1.0 / abs_sq(obstacle2.point - obstacle1.point)
        radius_sq = sqr(radius)

        def clear_of_line() -> bool:
            return (
                sqr(q1_left) * inv_length_i >= radius_sq
                and sqr(q2_left) * inv_length_i >= radius_sq
            )

        if q1_left >= 0.0 and q2_left >= 0.0:
            return self._query_visibility_recursive(q1, q2, radius, node.left) and (
                clear_of_line()
                or self._query_visibility_recursive(q1, q2, radius, node.right)
            )
        if q1_left <= 0.0 and q2_left <= 0.0:
            return self._query_visibility_recursive(q1, q2, radius, node.right) and (
                clear_of_line()
                or self._query_visibility_recursive(q1, q2, radius, node.left)
            )
        if q1_left >= 0.0 and q2_left <= 0.0:
            # One can see through the obstacle from left to right.
            return self._query_visibility_recursive(
                q1, q2, radius, node.left
            ) and self._query_visibility_recursive(q1, q2, radius, node.right)

        point1_left_of_q = left_of(q1, q2, obstacle1.point)
        point2_left_of_q = left_of(q1, q2, obstacle2.point)
        inv_length_q = 1.0 / abs_sq(q2 - q1)
        return (
            point1_left_of_q * point2_left_of_q >= 0.0
            and sqr(point1_left_of_q) * inv_length_q > radius_sq
            and sqr(point2_left_of_q) * inv_length_q > radius_sq
            and self._query_visibility_recursive(q1, q2, radius, node.left)
            and self._query_visibility_recursive(q1, q2, radius, node.right)
        )