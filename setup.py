from setuptools import setup, find_packages

setup(
    name="command-router",
    version="0.1",
    packages=find_packages(include=["command_router", "command_router.*"]),
    python_requires=">=3.8",
    install_requires=[
        "click",
        "pyyaml",
        "aiohttp",
        "python-telegram-bot>=20",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "command-router=command_router.cli.main:cli",
        ],
    },
)
