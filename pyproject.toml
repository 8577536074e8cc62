[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bglog"
version = "0.1.0"
description = "Asynchronous logging with a background worker, pluggable sinks, dynamic log levels and fatal-signal handling"
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "asynchronous", "sink", "background", "crash handler", "log levels"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bglog"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
