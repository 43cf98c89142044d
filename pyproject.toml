[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "auth1"
version = "0.1.0"
description = "A small HTTP API service backed by SQLite with declarative schema migrations"
requires-python = ">=3.10"
keywords = ["http", "api", "sqlite", "migration", "schema", "fastapi"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: FastAPI",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "fastapi",
    "uvicorn",
]

[project.optional-dependencies]
test = [
    "pytest",
    "httpx",
]

[project.scripts]
auth1 = "auth1.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["auth1"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
