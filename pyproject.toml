[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "diskhealth"
version = "0.1.0"
description = "Collect, normalise and publish SMART disk health metrics from smartctl and nvme-cli"
requires-python = ">=3.10"
dependencies = []
keywords = ["smart", "smartctl", "nvme", "disk", "health", "monitoring", "nats"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: System :: Hardware",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
diskhealth = "diskhealth.monitor:main"

[tool.hatch.build.targets.wheel]
packages = ["diskhealth"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
