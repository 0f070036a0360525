[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gkrproof"
version = "0.1.0"
description = "Field arithmetic over GF((2^61-1)^2), Reed-Solomon FFT, Merkle trees and GKR sum-check proving"
requires-python = ">=3.10"
dependencies = []
keywords = ["gkr", "sumcheck", "zero-knowledge", "merkle", "fft", "reed-solomon", "finite-field"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gkrproof"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
