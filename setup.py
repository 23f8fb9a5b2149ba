"""deskcalc - desk calculator engine with memory and history."""
from setuptools import setup, find_packages

setup(
    name="deskcalc",
    version="1.0.0",
    description="Desk calculator engine with memory, history and a command line front-end",
    packages=find_packages(include=["deskcalc", "deskcalc.*"]),
    install_requires=[
        "click>=8.1.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "deskcalc=deskcalc.cli:main",
        ],
    },
    python_requires=">=3.10",
)
