[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "crmkit"
version = "0.1.0"
description = "Customer-relationship building blocks: content metadata, notifications, user statistics queries and welcome campaigns"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["crm", "notification", "campaign", "user-stats", "metadata", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Operating System :: OS Independent",
    "Topic :: Office/Business",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["crmkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
