#!/usr/bin/env python3
"""
Setup script for the F-Chat example bot
"""

from setuptools import setup, find_packages

setup(
    name="fchat-bot",
    version="0.0.1",
    description="Example bot client for the F-Chat WebSocket protocol",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "websockets==15.0",
        "httpx==0.27.2",
        "click==8.1.7",
        "typer==0.12.3",
        "rich==13.9.2",
        "PyYAML==6.0.2",
    ],
    extras_require={
        "test": [
            "pytest==8.4.2",
            "pytest-asyncio==1.2.0",
        ],
    },
    python_requires=">=3.9",
    entry_points={
        'console_scripts': [
            'fchat-bot=fchat.fchat_cli:main',
        ],
    },
)
