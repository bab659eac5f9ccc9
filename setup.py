#!/usr/bin/env python3
"""
Setup configuration for media-resolver
Structured metadata and stream URLs for YouTube search results and SoundCloud
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements (always installed)
core_requirements = [
    "requests>=2.31.0",
    "pyyaml>=6.0.1",
    "tqdm>=4.66.1",
    "click>=8.1.7",
    "rich-click>=1.7.0",
]

setup(
    name="media-resolver",
    version="0.1.0",
    author="media-resolver Team",
    description="Typed YouTube search results and SoundCloud track/playlist/stream resolution",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["media_resolver", "media_resolver.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "black>=23.11.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "media-resolver=media_resolver.cli:main",
        ],
    },
    keywords="youtube soundcloud search metadata stream resolver cli",
)
