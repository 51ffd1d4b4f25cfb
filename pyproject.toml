[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mpecdsa"
version = "0.1.0"
description = "Two-party ECDSA on secp256k1 with Paillier-based zero-knowledge proofs and MtA share conversion"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ecdsa",
    "secp256k1",
    "threshold-signatures",
    "mpc",
    "paillier",
    "zero-knowledge",
    "mta",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mpecdsa"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
