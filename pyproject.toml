[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "anyclient"
version = "0.2.0"
description = "Models, search, query building and markdown export for the Anytype local API"
requires-python = ">=3.10"
dependencies = []
keywords = ["anytype", "api", "client", "markdown", "export", "search"]
classifiers = [
    "Development Status :: 3 - Alpha",
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
packages = ["anyclient"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
