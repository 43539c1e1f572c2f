[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slskcore"
version = "0.1.0"
description = "Building blocks for a Soulseek client: transfer state tracking, upload queues, message routing and transfer slot limits."
requires-python = ">=3.10"
dependencies = []
keywords = ["soulseek", "p2p", "file-sharing", "transfers", "queue", "slots"]
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
    "Topic :: Communications :: File Sharing",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["slskcore"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
