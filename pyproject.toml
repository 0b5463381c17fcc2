[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "deliverykit"
version = "0.1.0"
description = "Domain models, repositories and services for a delivery platform: authentication, shops, products and user profiles."
requires-python = ">=3.10"
keywords = ["delivery", "shop", "authentication", "otp", "repository", "mongodb", "sql"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Office/Business",
    "Topic :: Database :: Front-Ends",
]
dependencies = [
    "pymongo",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["deliverykit"]

[tool.pytest.ini_options]
addopts = "-ra"
