[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "viewreconcile"
version = "0.1.0"
description = "Watch sources and write targets for reconciling Kubernetes-style objects and views held in memory"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "controller", "reconciler", "operator", "views", "merge-patch"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["viewreconcile"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
