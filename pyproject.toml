[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "volesim"
version = "0.1.0"
description = "An interactive simulator for the Vole teaching machine: 256 memory cells, 16 registers and a small instruction set"
requires-python = ">=3.10"
dependencies = []
keywords = ["vole", "simulator", "emulator", "cpu", "education", "machine language"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
volesim = "volesim.machine:main"

[tool.hatch.build.targets.wheel]
packages = ["volesim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
