[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ethsign"
version = "0.1.0"
description = "Ethereum transaction signing payloads, hex value types and V3 keystore wallet files"
requires-python = ">=3.10"
dependencies = [
    "pycryptodome",
    "cryptography",
]
keywords = [
    "ethereum",
    "keystore",
    "rlp",
    "eip-155",
    "eip-1559",
    "scrypt",
    "signing",
]
classifiers = [
    "Development Status :: 4 - Beta",
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
packages = ["ethsign"]

[tool.hatch.build.targets.sdist]
include = [
    "ethsign",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
