[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mms"
version = "0.1.0"
description = "Money management service: users, income and expense transactions, PASETO tokens and a small Flask HTTP server"
requires-python = ">=3.10"
keywords = ["money", "finance", "transactions", "accounting", "paseto", "flask", "mysql"]
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
    "Topic :: Office/Business :: Financial :: Accounting",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask>=2.2",
    "pyyaml>=6.0",
    "pymysql>=1.0",
    "pynacl>=1.5",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
mms = "mms.app:main"

[tool.hatch.build.targets.wheel]
packages = ["mms"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
