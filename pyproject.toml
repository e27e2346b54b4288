[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "autorig"
version = "0.1.0"
description = "Building blocks for automatic rigging: vectors, automatic differentiation, half-edge meshes, nearest-point queries and octree distance fields"
requires-python = ">=3.10"
dependencies = []
keywords = ["rigging", "mesh", "half-edge", "distance field", "octree", "automatic differentiation", "3d"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["autorig"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
