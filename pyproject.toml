[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "orcasim"
version = "0.1.0"
description = "Optimal reciprocal collision avoidance (ORCA) for two-dimensional multi-agent simulation"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "orca",
    "collision avoidance",
    "multi-agent",
    "simulation",
    "crowd",
    "robotics",
    "kd-tree",
    "linear programming",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["orcasim"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
