[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jvmsizer"
version = "0.1.0"
description = "Capacity, memory-safety and JVM tuning analysis for file upload/download servers"
requires-python = ">=3.10"
dependencies = []
keywords = ["jvm", "capacity-planning", "memory", "tuning", "file-transfer", "sizing"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Natural Language :: Chinese (Simplified)",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
jvmsizer = "jvmsizer.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["jvmsizer"]

[tool.pytest.ini_options]
addopts = "-ra"
