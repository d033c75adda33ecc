[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chipterm"
version = "0.1.0"
description = "A CHIP-8 emulator that draws its screen in the terminal"
requires-python = ">=3.10"
dependencies = []
keywords = ["chip8", "chip-8", "emulator", "terminal", "retro"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
chipterm = "chipterm.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["chipterm"]

[tool.pytest.ini_options]
addopts = "-ra"
