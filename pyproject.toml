[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "voxelcraft"
version = "0.1.0"
description = "Voxel world core: chunked block storage, Perlin terrain, face meshing, ray picking, cameras and OBJ loading"
requires-python = ">=3.10"
dependencies = []
keywords = ["voxel", "chunk", "perlin", "terrain", "mesh", "raycast", "obj", "camera"]
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
    "Topic :: Games/Entertainment :: Simulation",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["voxelcraft"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
