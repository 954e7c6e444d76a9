[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "watchfilter"
version = "0.1.0"
description = "Event filterers for file watchers: gitignore-style globsets, ignore files and a tagged filter language"
requires-python = ">=3.10"
dependencies = []
keywords = ["filter", "gitignore", "glob", "file-watcher", "events"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["watchfilter"]

[tool.pytest.ini_options]
addopts = "-ra"
