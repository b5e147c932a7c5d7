[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tinyunix"
version = "0.1.0"
description = "Pieces of a small teaching Unix in Python: Sv39 page tables, ELF headers, a free-list allocator, a shell parser and classic user programs"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating-system",
    "teaching",
    "page-table",
    "sv39",
    "elf",
    "shell",
    "grep",
    "malloc",
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
    "Topic :: System :: Operating System",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[project.scripts]
tinyunix-grep = "tinyunix.grep:main"
tinyunix-cat = "tinyunix.coreutils:cat_main"
tinyunix-echo = "tinyunix.coreutils:echo_main"
tinyunix-wc = "tinyunix.coreutils:wc_main"
tinyunix-ls = "tinyunix.coreutils:ls_main"
tinyunix-find = "tinyunix.coreutils:find_main"
tinyunix-primes = "tinyunix.coreutils:primes_main"

[tool.hatch.build.targets.wheel]
packages = ["tinyunix"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
