[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "paratable"
version = "0.1.0"
description = "Statement table for parachain candidate attestation, with a toy adder parachain and collator"
requires-python = ">=3.10"
dependencies = [
    "pycryptodome",
]
keywords = ["consensus", "parachain", "attestation", "statement-table", "collator"]
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
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
adder-collator = "paratable.collator:main"

[tool.hatch.build.targets.wheel]
packages = ["paratable"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
