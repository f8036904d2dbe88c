"""Optimal reciprocal collision avoidance for two-dimensional multi-agent simulation.

Vectors, agents, obstacles, k-d trees, the ORCA linear programs and the
simulator that ties them together.
"""

__version__ = "0.1.0"