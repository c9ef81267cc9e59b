#!/usr/bin/env python3
"""Setup script for CMS Categorizer."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="cms-categorizer",
    version="0.1.0",
    author="CMS Team",
    author_email="team@example.com",
    description="Heuristic content categorization and auto-assignment for a CMS",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP :: Site Management",
        "Topic :: Text Processing :: Linguistic",
    ],
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.5",
        "pydantic-settings>=2.2",
        "structlog>=24.1",
        "click>=8.1",
        "jinja2>=3.1",
        "pyyaml>=6.0",
        "rich>=13.7.1",
    ],
    extras_require={
        "dev": [
            "pytest>=8.2",
            "pytest-asyncio>=0.23",
            "ruff>=0.4",
            "mypy>=1.10",
            "coverage>=7.5",
            "pytest-cov>=4.1",
        ]
    },
    entry_points={
        "console_scripts": [
            "cms-categorizer=cms_categorizer.orchestrator:cli",
        ],
    },
    include_package_data=True,
    package_data={
        "cms_categorizer": ["templates/*.md"],
    },
)
