[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "neocities"
version = "0.0.4"
description = "Command-line client and library for the Neocities web hosting API"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["neocities", "static site", "upload", "web hosting", "cli"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Site Management",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
neocities = "neocities.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["neocities"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
