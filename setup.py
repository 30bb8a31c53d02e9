#!/usr/bin/env python3
"""
PaperSim - per-market paper-trading simulator
Setup script for packaging and installing the command-line tool.
"""

from pathlib import Path

from setuptools import setup, find_packages

# Package metadata
__version__ = "0.1.0"
__author__ = "PaperSim Team"
__email__ = "team@papersim.dev"

# Read long description from README
long_description = ""
readme_path = Path("README.md")
if readme_path.exists():
    with open(readme_path, "r", encoding="utf-8") as fh:
        long_description = fh.read()

# Setup configuration
setup(
    name="papersim",
    version=__version__,
    author=__author__,
    author_email=__email__,
    description="Per-market paper-trading simulator with inventory-skewed quoting",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["papersim", "papersim.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Financial and Insurance Industry",
        "Topic :: Office/Business :: Financial :: Investment",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Operating System :: POSIX :: Linux",
        "Operating System :: Microsoft :: Windows",
    ],
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.24.0",
        "pandas>=2.0.0",
        "pyarrow>=13.0.0",
        "pydantic>=2.5.0",
        "click>=8.1.7",
        "PyYAML>=6.0",
        "requests>=2.31.0",
        "websocket-client>=1.6.0",
    ],
    extras_require={
        "dev": ["pytest>=7.4.0", "black>=23.10.0", "mypy>=1.7.0"],
    },
    entry_points={
        "console_scripts": [
            "papersim=papersim.cli:main",
        ],
    },
    zip_safe=False,
)
