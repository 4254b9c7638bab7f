[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "osdrills"
version = "0.1.0"
description = "Small, testable models of operating-system mechanisms: atomics, locks, green threads, async primitives, page tables and TLBs."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating-systems",
    "education",
    "spinlock",
    "rwlock",
    "page-table",
    "sv39",
    "tlb",
    "asyncio",
    "green-threads",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["osdrills"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
