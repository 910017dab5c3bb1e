[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lumenui"
version = "0.1.0"
description = "Fine-grained reactive signals, effects, scopes and property animations for building user interfaces."
requires-python = ">=3.10"
dependencies = []
keywords = ["reactive", "signals", "effects", "memo", "ui", "animation", "easing"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: User Interfaces",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lumenui"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
