[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pulith"
version = "0.1.0"
description = "Building blocks for a front end to native package managers: version parsing, package descriptors, profiles, downloads and a local tool inventory."
requires-python = ">=3.11"
keywords = ["package-manager", "winget", "apt", "versioning", "calver", "semver"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Software Distribution",
]
dependencies = [
    "httpx",
    "jinja2",
    "tabulate",
    "tqdm",
]

[project.optional-dependencies]
test = [
    "pytest",
    "respx",
]

[tool.hatch.build.targets.wheel]
packages = ["pulith"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"
