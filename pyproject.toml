[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tomasim"
version = "0.1.0"
description = "Cycle-stepped RV32I out-of-order CPU simulator built around Tomasulo's algorithm"
requires-python = ">=3.10"
dependencies = []
keywords = ["riscv", "rv32i", "tomasulo", "simulator", "cpu", "reorder-buffer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tomasim = "tomasim.cpu:main"

[tool.hatch.build.targets.wheel]
packages = ["tomasim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
