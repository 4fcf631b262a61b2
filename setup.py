"""Setup script for the hostwatch package."""

from setuptools import find_packages, setup

setup(
    name="hostwatch",
    version="0.1.0",
    description="Host reachability monitoring with change notifications",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pyyaml",
        "python-dotenv",
        "paho-mqtt>=2.0.0",
        "aiohttp",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-asyncio",
            "black",
            "isort",
            "mypy",
        ],
    },
    entry_points={
        "console_scripts": [
            "hostwatch=hostwatch.service:main",
        ],
    },
)
