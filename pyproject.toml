[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "runkit"
version = "0.1.0"
description = "Small building blocks for services: runner managers with graceful closers, context pools, byte buffer pools and config normalisation."
requires-python = ">=3.11"
dependencies = []
keywords = ["concurrency", "runner", "shutdown", "context", "config", "buffer pool"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["runkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
