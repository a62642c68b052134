[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "systemslab"
version = "0.1.0"
description = "Teaching tools for systems programming: a simulated heap, allocator trace files, cycle timing, robust I/O, host lookup and a CGI adder"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "malloc",
    "heap",
    "trace",
    "timing",
    "robust io",
    "cgi",
    "education",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
systemslab-hostinfo = "systemslab.hostinfo:main"
systemslab-adder = "systemslab.adder:main"

[tool.hatch.build.targets.wheel]
packages = ["systemslab"]

[tool.pytest.ini_options]
addopts = "-ra"
