[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nouframe"
version = "0.1.0"
description = "Scene bookkeeping for real-time 3D: transform hierarchies, entities, cameras, input state, glTF mesh loading, sprite sheet timing and batched debug geometry."
requires-python = ">=3.10"
keywords = ["3d", "gltf", "glb", "transform", "camera", "entity", "input", "sprite", "game"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "numpy",
    "psutil",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["nouframe"]

[tool.pytest.ini_options]
addopts = "-ra"
