[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hybridseal"
version = "0.1.0"
description = "Hybrid RSA/AES-GCM sealing of short messages with RSA signatures and a fixed binary wire format"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = [
    "cryptography",
    "hybrid-encryption",
    "aes-gcm",
    "rsa-oaep",
    "signature",
    "serialization",
]
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
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["hybridseal"]

[tool.hatch.build.targets.sdist]
include = [
    "hybridseal",
    "tests",
    "pyproject.toml",
    "README.md",
]

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
strict = true
