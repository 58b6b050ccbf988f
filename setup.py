"""
Setup script for coursescore.

coursescore computes completion and scoring state over hierarchical course
content. It serves two roles:

1. Library - Scoring sets (assessments, buckets) that can be intersected
   through their ancestor/descendant hierarchy
2. Reporting - A terminal report of set completion and scores

The 'coursescore' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="coursescore",
    version="0.1.0",
    description="Completion and scoring sets over hierarchical course content",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["coursescore", "coursescore.*"]),
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.12.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "coursescore=coursescore.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning assessment scoring completion education",
)
