[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cpswap"
version = "0.2.0"
description = "Account state, price oracle and admin operations for a constant product automated market maker"
requires-python = ">=3.10"
dependencies = []
keywords = ["amm", "constant-product", "liquidity-pool", "oracle", "fees"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cpswap"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
