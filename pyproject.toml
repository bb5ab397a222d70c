[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mavtraj"
version = "0.1.0"
description = "Polynomial trajectory building blocks for multirotor aerial vehicles: polynomials, vertices, segment time estimates, input feasibility checks and trajectory messages."
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["trajectory", "polynomial", "multirotor", "uav", "robotics", "feasibility"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mavtraj"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
