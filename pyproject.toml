[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wonka"
version = "0.1.0"
description = "Building blocks for an agent-workflow orchestrator: task types, tmux session control and a rapid-failure circuit breaker."
requires-python = ">=3.10"
dependencies = []
keywords = ["orchestrator", "tmux", "agents", "circuit-breaker", "workflow"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wonka"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
