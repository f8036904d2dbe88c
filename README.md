# orcasim

A pure-Python library for local collision avoidance between agents moving in
the plane, using Optimal Reciprocal Collision Avoidance (ORCA). Each agent
turns its nearby neighbours into half-plane constraints on its velocity. It
then solves a small linear program for the velocity that is closest to its
preferred one and keeps it clear of collisions for a chosen time horizon.

Neighbours are found through a k-d tree over the agents. A second k-d tree
over the polygonal obstacles finds the obstacle edges near each agent and
answers visibility queries.

## Installation

The package has no runtime dependencies. From a checkout of the project:

```
pip install .
```

To run the test suite, install the `test` extra and run `pytest`:

```
pip install ".[test]"
pytest
```

## Modules

- `orcasim.vector`
  - `Vector2` is an immutable two-dimensional vector with fields `x` and `y`.
    It supports `+`, `-`, unary `-`, multiplication and division by a number,
    the dot product as `a.dot(b)` or `a @ b`, and unpacking (`x, y = v`).
  - Helpers: `abs_sq`, `mag`, `det`, `normalize`, `sqr`, `left_of` and
    `dist_sq_point_line_segment`.
  - The constant `RVO_EPSILON`.
- `orcasim.params`: `AgentParams`, a frozen record of an agent's settings:
  - `neighbor_dist`
  - `max_neighbors`
  - `time_horizon`
  - `time_horizon_obst`
  - `radius`
  - `max_speed`
  - `velocity`, which defaults to the zero vector
- `orcasim.lines`
  - `Line` is a directed constraint with `point`, `direction` and `normal`.
    The permitted velocities lie in the half-plane to the left of it.
  - `SimulatorError`, a `ValueError`, is raised when no agent defaults are
    set and `add_agent` is called without parameters. It is also raised when
    an obstacle has fewer than two vertices.
- `orcasim.linear_program`
  - `linear_program1` returns the best point on one line, or `None` when the
    problem is infeasible.
  - `linear_program2` returns `(fail_index, result)`. `fail_index` equals the
    number of lines on success.
  - `linear_program3` returns the velocity that least violates the lines
    from the failing one onward.
- `orcasim.obstacle`: `Obstacle`, one vertex of a polygon, linked to the
  vertices before and after it.
- `orcasim.agent`: `Agent`, which holds an agent's state, its neighbour lists
  and its ORCA lines.
- `orcasim.kdtree`: `KdTree`, the agent and obstacle trees.
- `orcasim.simulator`: `RVOSimulator`, which owns everything and advances the
  simulation.

## Usage

```python
from orcasim.params import AgentParams
from orcasim.simulator import RVOSimulator
from orcasim.vector import Vector2, abs_sq, normalize

sim = RVOSimulator(time_step=0.25)
sim.set_agent_defaults(
    AgentParams(
        neighbor_dist=15.0,
        max_neighbors=10,
        time_horizon=10.0,
        time_horizon_obst=5.0,
        radius=2.0,
        max_speed=2.0,
    )
)

for position in (Vector2(-50.0, -50.0), Vector2(50.0, -50.0),
                 Vector2(50.0, 50.0), Vector2(-50.0, 50.0)):
    sim.add_agent(position)

goals = [-sim.agent(i).position for i in range(sim.num_agents)]

for _ in range(1000):
    for i, goal in enumerate(goals):
        agent = sim.agent(i)
        to_goal = goal - agent.position
        if abs_sq(to_goal) < agent.radius ** 2:
            agent.pref_velocity = Vector2()
        else:
            agent.pref_velocity = normalize(to_goal)
    sim.do_step()

print(sim.global_time, [str(sim.agent(i).position) for i in range(sim.num_agents)])
```

Points to note:

- `add_agent(position, params=None)` returns the new agent's number. Agents
  may be added at any time, including between steps.
- `agent(agent_no)` returns the `Agent` itself, and it raises `IndexError`
  for an unknown number. You change an agent by setting its attributes
  directly: `position`, `velocity`, `pref_velocity`, `radius`, `max_speed`,
  `max_neighbors`, `neighbor_dist`, `time_horizon` or `time_horizon_obst`.
- `do_step()` does three things:
  1. It rebuilds the agent tree.
  2. It computes every agent's neighbours and new velocity.
  3. It moves every agent and adds `time_step` to `global_time`.
- After a step you can read:
  - `agent_neighbors(agent_no)`, the neighbour agent numbers, nearest first;
  - `obstacle_neighbors(agent_no)`, the first vertex numbers of nearby
    obstacle edges;
  - `orca_lines(agent_no)`, the agent's constraints.
- `num_agents` and `num_obstacle_vertices` give the counts.

### Obstacles

```python
first = sim.add_obstacle([Vector2(-7.0, -20.0), Vector2(7.0, -20.0),
                          Vector2(7.0, 20.0), Vector2(-7.0, 20.0)])
sim.process_obstacles()
sim.query_visibility(Vector2(-50.0, 0.0), Vector2(50.0, 0.0), 1.0)  # False
```

- Vertices are listed counter-clockwise. For a bounding polygon, list them
  clockwise.
- `add_obstacle` returns the number of the polygon's first vertex.
- `process_obstacles()` builds the obstacle tree. Obstacles added afterwards
  are not seen until it is called again. While building, it may split edges,
  and each split adds a new vertex.
- `obstacle_vertex`, `next_obstacle_vertex_no` and `prev_obstacle_vertex_no`
  walk the polygons.
- `query_visibility(point1, point2, radius=0.0)` tells whether the segment
  between the points keeps the given clearance from the processed obstacles.
  It is always true before processing.

## What it does not do

- Obstacles are not turned into velocity constraints. Nearby obstacle edges
  are collected into `obstacle_neighbors`, but only other agents produce ORCA
  lines. Agents therefore do not steer around obstacles on their own. Use
  `query_visibility` or your own planning to set preferred velocities that
  avoid them.
- There is no global path planning, no notion of goals, no drawing or
  visualisation, and no command-line program. The library computes
  velocities and positions, and the caller decides what to do with them.
- Agents are processed one after another in a single thread.