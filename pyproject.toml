[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ordinals"
version = "0.1.0"
description = "Ordinal satoshi numbering, notation parsing and inscription decoding"
requires-python = ">=3.10"
dependencies = []
keywords = ["bitcoin", "ordinals", "satoshi", "inscriptions", "rarity"]
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
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ordinals = "ordinals.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ordinals"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
