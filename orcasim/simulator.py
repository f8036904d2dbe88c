"""The simulation: agents, obstacles and the stepping of time."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .agent import Agent
from .kdtree import KdTree
from .lines import Line, SimulatorError
from .obstacle import Obstacle
from .params import AgentParams
from .vector import Vector2, left_of, normalize


class RVOSimulator:
    """A multi-agent simulation using optimal reciprocal collision avoidance.

    Agents are reached through :meth:`agent` and changed by setting their
    attributes (``position``, ``velocity``, ``pref_velocity``, ``radius``,
    ``max_speed`` and so on) directly.
    """

    def __init__(
        self, time_step: float = 0.0, defaults: AgentParams | None = None
    ) -> None:
        self.time_step = time_step
        self.global_time = 0.0
        self.default_params = defaults
        self.agents: list[Agent] = []
        self.obstacles: list[Obstacle] = []
        self.kd_tree = KdTree(self)

    def __repr__(self) -> str:
        return (
            f"RVOSimulator(time_step={self.time_step}, "
            f"global_time={self.global_time}, agents={len(self.agents)}, "
            f"obstacle_vertices={len(self.obstacles)})"
        )

    @property
    def num_agents(self) -> int:
        """The number of agents in the simulation."""
        return len(self.agents)

    @property
    def num_obstacle_vertices(self) -> int:
        """The number of obstacle vertices in the simulation."""
        return len(self.obstacles)

    def set_agent_defaults(self, params: AgentParams) -> None:
        """Set the parameters used for agents added without their own."""
        self.default_params = params

    def add_agent(self, position: Vector2, params: AgentParams | None = None) -> int:
        """Add an agent at ``position`` and return its number.

        Without ``params`` the defaults are used; raises SimulatorError when
        no defaults have been set.
        """
        if params is None:
            params = self.default_params
            if params is None:
                raise SimulatorError("agent defaults have not been set")

        agent = Agent(
            sim=self,
            id=len(self.agents),
            position=position,
            velocity=params.velocity,
            max_neighbors=params.max_neighbors,
            max_speed=params.max_speed,
            neighbor_dist=params.neighbor_dist,
            radius=params.radius,
            time_horizon=params.time_horizon,
            time_horizon_obst=params.time_horizon_obst,
        )
        self.agents.append(agent)
        return agent.id

    def add_obstacle(self, vertices: Iterable[Vector2]) -> int:
        """Add a polygonal obstacle and return the number of its first vertex.

        Vertices are listed counterclockwise; list them clockwise for a
        bounding polygon. Raises SimulatorError for fewer than two vertices.
        """
        points: Sequence[Vector2] = list(vertices)
        count = len(points)
        if count < 2:
            raise SimulatorError("an obstacle needs at least two vertices")

        first_no = len(self.obstacles)
        new_obstacles: list[Obstacle] = []
        for index, point in enumerate(points):
            prev_point = points[index - 1]
            next_point = points[(index + 1) % count]
            is_convex = count == 2 or left_of(prev_point, point, next_point) >= 0.0
            new_obstacles.append(
                Obstacle(
                    point=point,
                    unit_dir=normalize(next_point - point),
                    is_convex=is_convex,
                    id=first_no + index,
                )
            )

        for index, obstacle in enumerate(new_obstacles):
            obstacle.prev_obstacle = new_obstacles[index - 1]
            obstacle.next_obstacle = new_obstacles[(index + 1) % count]

        self.obstacles.extend(new_obstacles)
        return first_no

    def process_obstacles(self) -> None:
        """Build the obstacle tree so that added obstacles take effect.

        Obstacles added afterwards are not accounted for until this is
        called again.
        """
        self.kd_tree.build_obstacle_tree()

    def do_step(self) -> None:
        """Advance every agent by one time step."""
        self.kd_tree.build_agent_tree()

        for agent in self.agents:
            agent.compute_neighbors()
            agent.compute_new_velocity()

        for agent in self.agents:
            agent.update()

        self.global_time += self.time_step

    def agent(self, agent_no: int) -> Agent:
        """Return the agent with the given number."""
        if not 0 <= agent_no < len(self.agents):
            raise IndexError(f"no agent number {agent_no}")
        return self.agents[agent_no]

    def agent_neighbors(self, agent_no: int) -> list[int]:
        """Return the numbers of the agent's neighbours, nearest first."""
        return [other.id for _, other in self.agent(agent_no).agent_neighbors]

    def obstacle_neighbors(self, agent_no: int) -> list[int]:
        """Return the first vertex numbers of the agent's nearby obstacle edges."""
        return [
            obstacle.id for _, obstacle in self.agent(agent_no).obstacle_neighbors
        ]

    def orca_lines(self, agent_no: int) -> list[Line]:
        """Return the ORCA constraints used for the agent's current velocity."""
        return list(self.agent(agent_no).orca_lines)

    def _obstacle(self, vertex_no: int) -> Obstacle:
        if not 0 <= vertex_no < len(self.obstacles):
            raise IndexError(f"no obstacle vertex number {vertex_no}")
        return self.obstacles[vertex_no]

    def obstacle_vertex(self, vertex_no: int) -> Vector2:
        """Return the position of an obstacle vertex."""
        return self._obstacle(vertex_no).point

    def next_obstacle_vertex_no(self, vertex_no: int) -> int:
        """Return the number of the vertex following ``vertex_no`` in its polygon."""
        return self._obstacle(vertex_no).next_obstacle.id

    def prev_obstacle_vertex_no(self, vertex_no: int) -> int:
        """Return the number of the vertex preceding ``vertex_no`` in its polygon."""
        return self._obstacle(vertex_no).prev_obstacle.id

    def query_visibility(
        self, point1: Vector2, point2: Vector2, radius: float = 0.0
    ) -> bool:
        """Return whether two points see each other past the obstacles.

        ``radius`` is the clearance required. Always true before the
        obstacles have been processed.
        """
        return self.kd_tree.query_visibility(point1, point2, radius)