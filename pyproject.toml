[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mimiru"
version = "2.0.0"
description = "Recommendation engine for audio content: collaborative, content-based, popularity and new-content signals with cached results"
requires-python = ">=3.10"
dependencies = [
    "redis",
]
keywords = ["recommendation", "collaborative-filtering", "audio", "cache", "redis"]
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
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["mimiru"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
