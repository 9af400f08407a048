[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "flowshaper"
version = "0.1.0"
description = "UDP packet receiver that sorts traffic into rate-limited, prioritised flow queues"
requires-python = ">=3.10"
dependencies = []
keywords = ["udp", "traffic-shaping", "rate-limiting", "priority-queue", "networking"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
flowshaper = "flowshaper.app:main"
flowshaper-send = "flowshaper.sender:main"

[tool.hatch.build.targets.wheel]
packages = ["flowshaper"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
