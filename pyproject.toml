[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "angelrig"
version = "0.1.0"
description = "Heuristic landmark detection and rig asset generation for humanoid meshes"
requires-python = ">=3.10"
dependencies = []
keywords = ["rigging", "skeleton", "landmarks", "3d", "mesh", "animation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["angelrig"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
