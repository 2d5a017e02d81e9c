[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "semconv-resolve"
version = "0.1.0"
description = "Resolve semantic convention registries into a self-contained resolved telemetry schema."
requires-python = ">=3.10"
dependencies = []
keywords = ["semantic-conventions", "telemetry", "schema", "registry", "resolver"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["semconv_resolve"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
