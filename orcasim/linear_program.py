"""Small linear programs over half-plane constraints and a speed circle."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .lines import Line
from .vector import RVO_EPSILON, Vector2, abs_sq, det, normalize, sqr


def linear_program1(
    lines: Sequence[Line],
    line_no: int,
    radius: float,
    opt_velocity: Vector2,
    direction_opt: bool,
) -> Vector2 | None:
    """Solve a one-dimensional program on ``lines[line_no]``.

    The constraints are the lines before ``line_no`` and a circle of the given
    radius around the origin. Returns the optimal point on the line, or None
    when the problem is infeasible.
    """
    line = lines[line_no]
    dot_product = line.point.dot(line.direction)
    discriminant = sqr(dot_product) + sqr(radius) - abs_sq(line.point)

    if discriminant < 0.0:
        # The speed circle lies entirely outside this line.
        return None

    sqrt_discriminant = math.sqrt(discriminant)
    t_left = -dot_product - sqrt_discriminant
    t_right = -dot_product + sqrt_discriminant

    for other in lines[:line_no]:
        denominator = det(line.direction, other.direction)
        numerator = det(other.direction, line.point - other.point)

        if abs(denominator) <= RVO_EPSILON:
            # The lines are (almost) parallel.
            if numerator < 0.0:
                return None
            continue

        t = numerator / denominator
        if denominator >= 0.0:
            t_right = min(t_right, t)
        else:
            t_left = max(t_left, t)

        if t_left > t_right:
            return None

    if direction_opt:
        if opt_velocity.dot(line.direction) > 0.0:
            return line.point + t_right * line.direction
        return line.point + t_left * line.direction

    t = line.direction.dot(opt_velocity - line.point)
    t = min(max(t, t_left), t_right)
    return line.point + t * line.direction


def linear_program2(
    lines: Sequence[Line],
    radius: float,
    opt_velocity: Vector2,
    direction_opt: bool,
) -> tuple[int, Vector2]:
    """Solve a two-dimensional program over ``lines`` and a speed circle.

    Returns ``(fail_index, result)``. ``fail_index`` equals ``len(lines)`` on
    success; otherwise it is the line the program failed on, and ``result``
    is the best point found before that line.
    """
    if direction_opt:
        # The optimisation velocity is of unit length in this case.
        result = opt_velocity * radius
    elif abs_sq(opt_velocity) > sqr(radius):
        result = normalize(opt_velocity) * radius
    else:
        result = opt_velocity

    for index, line in enumerate(lines):
        if det(line.direction, line.point - result) > 0.0:
            candidate = linear_program1(
                lines, index, radius, opt_velocity, direction_opt
            )
            if candidate is None:
                return index, result
            result = candidate

    return len(lines), result


def linear_program3(
    lines: Sequence[Line],
    num_obst_lines: int,
    begin_line: int,
    radius: float,
    result: Vector2,
) -> Vector2:
    """Find the velocity that least violates the constraints from ``begin_line``.

    The first ``num_obst_lines`` lines are treated as hard constraints.
    ``result`` is the point returned by a failed :func:`linear_program2`;
    the improved point is returned.
    """
    distance = 0.0

    for index in range(begin_line, len(lines)):
        line_i = lines[index]
        if det(line_i.direction, line_i.point - result) <= distance:
            continue

        proj_lines = list(lines[:num_obst_lines])
        for line_j in lines[num_obst_lines:index]:
            determinant = det(line_i.direction, line_j.direction)

            if abs(determinant) <= RVO_EPSILON:
                if line_i.direction.dot(line_j.direction) > 0.0:
                    # Parallel and pointing the same way.
                    continue
                point = 0.5 * (line_i.point + line_j.point)
            else:
                point = line_i.point + (
                    det(line_j.direction, line_i.point - line_j.point) / determinant
                ) * line_i.direction

            proj_lines.append(
                Line(point, normalize(line_j.direction - line_i.direction))
            )

        fail, candidate = linear_program2(
            proj_lines,
            radius,
            Vector2(-line_i.direction.y, line_i.direction.x),
            True,
        )
        # A failure here can only come from rounding error; keep the old result.
        if fail >= len(proj_lines):
            result = candidate

        distance = det(line_i.direction, line_i.point - result)

    return result