import math
from dataclasses import dataclass, field

import pytest

from orcasim.agent import Agent
from orcasim.obstacle import Obstacle
from orcasim.vector import Vector2, det, mag


@dataclass
class _BruteForceTree:
    agents: list = field(default_factory=list)
    obstacles: list = field(default_factory=list)

    def compute_agent_neighbors(self, agent, range_sq):
        for other in self.agents:
            range_sq = agent.insert_agent_neighbor(other, range_sq)

    def compute_obstacle_neighbors(self, agent, range_sq):
        for obstacle in self.obstacles:
            agent.insert_obstacle_neighbor(obstacle, range_sq)


@dataclass
class _Sim:
    time_step: float = 0.25
    kd_tree: _BruteForceTree = field(default_factory=_BruteForceTree)


def _agent(sim, position, agent_id=0, **kwargs):
    values = dict(
        max_neighbors=10,
        max_speed=2.0,
        neighbor_dist=15.0,
        radius=1.0,
        time_horizon=2.0,
        time_horizon_obst=2.0,
    )
    values.update(kwargs)
    agent = Agent(sim, id=agent_id, position=position, **values)
    sim.kd_tree.agents.append(agent)
    return agent


def _segment(a, b):
    first = Obstacle(point=a, id=0)
    second = Obstacle(point=b, id=1)
    first.next_obstacle = second
    first.prev_obstacle = second
    second.next_obstacle = first
    second.prev_obstacle = first
    return first


def test_insert_agent_neighbor_skips_self():
    sim = _Sim()
    me = _agent(sim, Vector2(0.0, 0.0))
    assert me.insert_agent_neighbor(me, 100.0) == 100.0
    assert me.agent_neighbors == []


def test_insert_agent_neighbor_sorts_by_distance():
    sim = _Sim()
    me = _agent(sim, Vector2(0.0, 0.0))
    far = _agent(sim, Vector2(3.0, 0.0), 1)
    near = _agent(sim, Vector2(1.0, 0.0), 2)
    middle = _agent(sim, Vector2(0.0, 2.0), 3)
    range_sq = 100.0
    for other in (far, near, middle):
        range_sq = me.insert_agent_neighbor(other, range_sq)
    assert [a for _, a in me.agent_neighbors] == [near, middle, far]
    distances = [d for d, _ in me.agent_neighbors]
    assert distances == sorted(distances)
    assert range_sq == 100.0


def test_insert_agent_neighbor_caps_and_shrinks_range():
    sim = _Sim()
    me = _agent(sim, Vector2(0.0, 0.0), max_neighbors=2)
    others = [
        _agent(sim, Vector2(float(x), 0.0), x) for x in (4, 1, 3, 2)
    ]
    range_sq = 100.0
    for other in others:
        range_sq = me.insert_agent_neighbor(other, range_sq)
    kept = [a.position.x for _, a in me.agent_neighbors]
    assert kept == [1.0, 2.0]
    assert range_sq == me.agent_neighbors[-1][0]


def test_insert_agent_neighbor_ignores_out_of_range():
    sim = _Sim()
    me = _agent(sim, Vector2(0.0, 0.0))
    other = _agent(sim, Vector2(5.0, 0.0), 1)
    assert me.insert_agent_neighbor(other, 25.0) == 25.0
    assert me.agent_neighbors == []


def test_insert_obstacle_neighbor_orders_edges():
    sim = _Sim()
    me = _agent(sim, Vector2(0.0, 0.0))
    far = _segment(Vector2(-1.0, 3.0), Vector2(1.0, 3.0))
    near = _segment(Vector2(-1.0, 1.0), Vector2(1.0, 1.0))
    me.insert_obstacle_neighbor(far, 100.0)
    me.insert_obstacle_neighbor(near, 100.0)
    assert [o for _, o in me.obstacle_neighbors] == [near, far]


def test_insert_obstacle_neighbor_ignores_out_of_range():
    sim = _Sim()
    me = _agent(sim, Vector2(0.0, 0.0))
    edge = _segment(Vector2(-1.0, 3.0), Vector2(1.0, 3.0))
    me.insert_obstacle_neighbor(edge, 1.0)
    assert me.obstacle_neighbors == []


def test_compute_neighbors_uses_tree():
    sim = _Sim()
    me = _agent(sim, Vector2(0.0, 0.0), neighbor_dist=5.0)
    inside = _agent(sim, Vector2(2.0, 0.0), 1)
    _agent(sim, Vector2(50.0, 0.0), 2)
    edge = _segment(Vector2(-1.0, 1.0), Vector2(1.0, 1.0))
    sim.kd_tree.obstacles.append(edge)
    me.compute_neighbors()
    assert [a for _, a in me.agent_neighbors] == [inside]
    assert [o for _, o in me.obstacle_neighbors] == [edge]


def test_compute_neighbors_without_max_neighbors_finds_no_agents():
    sim = _Sim()
    me = _agent(sim, Vector2(0.0, 0.0), max_neighbors=0)
    _agent(sim, Vector2(1.0, 0.0), 1)
    me.compute_neighbors()
    assert me.agent_neighbors == []


def test_new_velocity_without_neighbors_is_preferred_velocity():
    sim = _Sim()
    me = _agent(sim, Vector2(0.0, 0.0), neighbor_dist=5.0)
    _agent(sim, Vector2(100.0, 0.0), 1)
    me.pref_velocity = Vector2(1.0, 0.5)
    me.compute_neighbors()
    me.compute_new_velocity()
    assert me.orca_lines == []
    assert me.new_velocity == Vector2(1.0, 0.5)


def test_new_velocity_clamped_to_max_speed():
    sim = _Sim()
    me = _agent(sim, Vector2(0.0, 0.0), max_speed=1.0)
    me.pref_velocity = Vector2(3.0, 4.0)
    me.compute_new_velocity()
    assert mag(me.new_velocity) == pytest.approx(1.0)
    assert det(me.new_velocity, me.pref_velocity) == pytest.approx(0.0, abs=1e-9)
    assert me.new_velocity.dot(me.pref_velocity) > 0.0


def _head_on():
    sim = _Sim()
    a = _agent(sim, Vector2(0.0, 0.0), 0)
    b = _agent(sim, Vector2(4.0, 0.0), 1)
    a.velocity = a.pref_velocity = Vector2(1.0, 0.0)
    b.velocity = b.pref_velocity = Vector2(-1.0, 0.0)
    for agent in (a, b):
        agent.compute_neighbors()
    for agent in (a, b):
        agent.compute_new_velocity()
    return a, b


def test_head_on_lines_are_well_formed():
    a, b = _head_on()
    for agent in (a, b):
        assert len(agent.orca_lines) == 1
        line = agent.orca_lines[0]
        assert mag(line.direction) == pytest.approx(1.0)
        assert line.normal.dot(line.direction) == pytest.approx(0.0, abs=1e-12)
        assert det(line.direction, line.normal) == pytest.approx(1.0)


def test_head_on_new_velocities_satisfy_constraints():
    a, b = _head_on()
    for agent in (a, b):
        line = agent.orca_lines[0]
        assert det(line.direction, line.point - agent.new_velocity) <= 1e-9
        assert mag(agent.new_velocity) <= agent.max_speed + 1e-9
        assert agent.new_velocity != agent.pref_velocity


def test_head_on_is_symmetric():
    a, b = _head_on()
    assert b.new_velocity.x == pytest.approx(-a.new_velocity.x)
    assert b.new_velocity.y == pytest.approx(-a.new_velocity.y)


def test_collision_branch_builds_unit_line():
    sim = _Sim(time_step=0.25)
    a = _agent(sim, Vector2(0.0, 0.0), 0)
    b = _agent(sim, Vector2(0.5, 0.0), 1)
    a.pref_velocity = Vector2(1.0, 0.0)
    a.compute_neighbors()
    a.compute_new_velocity()
    assert [o for _, o in a.agent_neighbors] == [b]
    assert len(a.orca_lines) == 1
    assert mag(a.orca_lines[0].direction) == pytest.approx(1.0)
    assert mag(a.new_velocity) <= a.max_speed + 1e-9


def test_update_moves_by_new_velocity():
    sim = _Sim(time_step=1.0)
    me = _agent(sim, Vector2(0.0, 0.0))
    me.new_velocity = Vector2(1.5, -0.5)
    me.update()
    assert me.position == Vector2(1.5, -0.5)
    assert me.velocity == Vector2(1.5, -0.5)


def test_update_with_zero_velocity_keeps_position():
    sim = _Sim(time_step=0.25)
    me = _agent(sim, Vector2(3.0, 4.0))
    me.velocity = Vector2(1.0, 1.0)
    me.update()
    assert me.position == Vector2(3.0, 4.0)
    assert me.velocity == Vector2(0.0, 0.0)
    assert not math.isnan(me.position.x)