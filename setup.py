#!/usr/bin/env python3
"""
Setup configuration for jc, the JSON whitespace compactor.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the contents of README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

# Read requirements from requirements.txt
requirements = []
if (this_directory / "requirements.txt").exists():
    requirements = (this_directory / "requirements.txt").read_text().strip().split('\n')
    requirements = [req.strip() for req in requirements if req.strip() and not req.startswith('#')]

setup(
    name="jc-json-compactor",
    version="1.0.0",
    description="Streaming filter that strips insignificant whitespace from JSON",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=['compaction*']),
    py_modules=[
        'json_compactor',
        'base_classes',
        'compactor_configs',
        'stream_errors',
        'stream_monitoring',
    ],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Topic :: Text Processing :: Filters",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Operating System :: POSIX",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov",
            "black",
            "flake8",
            "mypy",
        ],
        "test": [
            "pytest>=6.0",
            "pytest-cov",
        ],
    },
    entry_points={
        "console_scripts": [
            "jc=json_compactor:main",
        ],
    },
    keywords=[
        "json",
        "minify",
        "compact",
        "filter",
        "pipeline",
    ],
)
