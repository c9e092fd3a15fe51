"""Packaging for notedex (src/ layout, pure Python)."""

from setuptools import find_packages, setup

setup(
    name="notedex",
    version="0.1.0",
    description="Notes in flat text files with append-only tag and author indexes",
    python_requires=">=3.11",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "click>=8.1",
    ],
    extras_require={
        "test": ["pytest>=8"],
    },
    entry_points={
        "console_scripts": ["notedex=notedex.cli:cli"],
    },
)
