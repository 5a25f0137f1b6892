[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gupshup_gui"
version = "0.1.0"
description = "HTTP gateway for the Gupshup partner API: login, apps, app tokens and message templates"
requires-python = ">=3.10"
keywords = ["gupshup", "whatsapp", "templates", "partner-api", "flask"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask>=2.2",
    "requests>=2.28",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
    "responses>=0.23",
]

[project.scripts]
gupshup-gui = "gupshup_gui.server:main"

[tool.hatch.build.targets.wheel]
packages = ["gupshup_gui"]

[tool.pytest.ini_options]
addopts = "-ra"
