[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fpydemo"
version = "1.0.0"
description = "Simulated flight-software components (ping, buffer, signal generator, type demo) and a rate-group driven topology"
requires-python = ">=3.10"
dependencies = []
keywords = ["flight software", "components", "telemetry", "rate groups", "simulation"]
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
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
fpydemo = "fpydemo.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["fpydemo"]

[tool.pytest.ini_options]
addopts = "-ra"
