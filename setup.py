"""
Setup script for learniverse-quiz.

Learniverse Quiz is the chapter comprehension quiz engine of the
Learniverse reading app. It provides:

1. Question Bank - chapter-keyed question sets loaded from JSON
2. Quiz Sessions - navigation, flagging, skipping, timing and scoring
3. Terminal Player - a Rich interface for taking and reviewing quizzes

The 'learniverse' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="learniverse-quiz",
    version="1.0.0",
    description="Chapter comprehension quiz engine for the Learniverse reading app",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Learniverse",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    package_data={"learniverse": ["data/*.json"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0,<0.27",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "learniverse=learniverse.cli.main:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning quiz reading comprehension children education",
)
