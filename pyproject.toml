[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "voicelink"
version = "0.1.0"
description = "A small voice relay: a broadcast TCP server, a client that streams raw float32 audio to it, and a JSON chat sender"
requires-python = ">=3.10"
keywords = ["voice", "audio", "relay", "broadcast", "tcp", "chat", "messenger"]
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
    "Framework :: AsyncIO",
    "Topic :: Communications :: Internet Phone",
    "Topic :: Communications :: Chat",
]
dependencies = []

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
voicelink-server = "voicelink.server:main"
voicelink-client = "voicelink.client:main"
voicelink-messenger = "voicelink.messenger:main"

[tool.hatch.build.targets.wheel]
packages = ["voicelink"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
