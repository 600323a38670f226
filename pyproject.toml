[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "karayaml"
version = "0.1.0"
description = "YAML-powered shortcut launcher for Karabiner-Elements on macOS"
requires-python = ">=3.10"
keywords = ["karabiner", "keyboard", "shortcuts", "yaml", "macos"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]
dependencies = [
    "pyyaml>=6.0",
    "tabulate>=0.9",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
karayaml = "karayaml.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["karayaml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
