[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linuxchecks"
version = "0.1.0"
description = "Nagios-style monitoring checks and helpers for Linux hosts"
requires-python = ">=3.10"
dependencies = []
keywords = ["nagios", "monitoring", "sysfs", "procfs", "linux", "plugins"]
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
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
check_clock = "linuxchecks.check_clock:main"
check_fc = "linuxchecks.check_fc:main"

[tool.hatch.build.targets.wheel]
packages = ["linuxchecks"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
