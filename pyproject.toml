[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "echomodels"
version = "0.1.0"
description = "TCP echo servers in four concurrency models, with an interactive client"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "echo", "server", "socket", "threading", "fork", "prefork"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
echo-client = "echomodels.client:main"
echo-server-single-thread = "echomodels.single_thread:main"
echo-server-multi-thread = "echomodels.multi_thread:main"
echo-server-multi-process = "echomodels.multi_process:main"
echo-server-prefork = "echomodels.prefork:main"

[tool.hatch.build.targets.wheel]
packages = ["echomodels"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
