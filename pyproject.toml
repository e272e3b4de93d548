[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gvalkey"
version = "0.1.0"
description = "A small in-memory key-value server that speaks the Redis serialization protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["redis", "resp", "key-value", "server", "in-memory", "cache"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: No Input/Output (Daemon)",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gvalkey = "gvalkey.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gvalkey"]

[tool.pytest.ini_options]
addopts = "-ra"
