from orcasim.obstacle import Obstacle
from orcasim.vector import Vector2


def test_defaults():
    obstacle = Obstacle()
    assert obstacle.is_convex is False
    assert obstacle.next_obstacle is None
    assert obstacle.prev_obstacle is None
    assert obstacle.id == 0
    assert obstacle.point == Vector2()


def test_linking_forms_cycle():
    first = Obstacle(point=Vector2(0.0, 0.0), id=0)
    second = Obstacle(point=Vector2(1.0, 0.0), id=1)
    first.next_obstacle = second
    second.prev_obstacle = first
    second.next_obstacle = first
    first.prev_obstacle = second
    assert first.next_obstacle.next_obstacle is first
    assert second.prev_obstacle.prev_obstacle is second


def test_repr_of_cycle_shows_neighbour_ids():
    first = Obstacle(id=4)
    second = Obstacle(id=5)
    first.next_obstacle = second
    first.prev_obstacle = second
    second.next_obstacle = first
    second.prev_obstacle = first
    text = repr(first)
    assert "id=4" in text
    assert "next=5" in text
    assert "prev=5" in text


def test_equality_is_identity():
    a = Obstacle(point=Vector2(1.0, 2.0))
    b = Obstacle(point=Vector2(1.0, 2.0))
    assert (a == b) is False
    assert a == a
    assert len({a, b}) == 2