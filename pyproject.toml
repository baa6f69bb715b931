[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "newslist"
version = "0.1.0"
description = "News list service: Redis-backed article indexes fed from a MongoDB oplog, served over HTTP and WebSocket"
requires-python = ">=3.10"
keywords = ["news", "redis", "mongodb", "oplog", "websocket", "index", "feed"]
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
    "Framework :: AsyncIO",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: News/Diary",
    "Topic :: Database :: Front-Ends",
]
dependencies = [
    "redis",
    "pymongo",
    "starlette",
    "uvicorn",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "httpx",
]

[project.scripts]
newslist = "newslist.web:main"

[tool.hatch.build.targets.wheel]
packages = ["newslist"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
