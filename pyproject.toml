[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "userhub"
version = "0.1.0"
description = "A small JSON HTTP service for storing, searching, updating and deleting users in PostgreSQL"
requires-python = ">=3.10"
keywords = ["http", "rest", "json", "users", "postgresql", "flask", "sqlalchemy", "crud"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask>=2.2",
    "pyyaml>=6.0",
    "sqlalchemy>=2.0",
    "werkzeug>=2.2",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
userhub = "userhub.app:main"

[tool.hatch.build.targets.wheel]
packages = ["userhub"]

[tool.hatch.build.targets.sdist]
include = ["userhub", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
