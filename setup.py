#!/usr/bin/env python3
"""
Setup configuration for playlist-player
A terminal sound player with persistent, per-track amplified playlists
"""

from pathlib import Path

from setuptools import setup, find_packages

# Read README for long description
readme = Path(__file__).parent / "README.md"
long_description = readme.read_text(encoding="utf-8") if readme.exists() else ""

# Core requirements (always installed)
core_requirements = [
    "mutagen>=1.47.0",
    "pydub>=0.25.1",
    "numpy>=1.24.0",
    "sounddevice>=0.4.6",
    "blessed>=1.20.0",
    "click>=8.1.7",
    "pyyaml>=6.0.1",
    "tqdm>=4.66.1",
    "colorama>=0.4.6",
    "python-dotenv>=1.0.0",
]

setup(
    name="playlist-player",
    version="0.1.0",
    author="Playlist-Player Team",
    description="Play sound files and manage playlists with per-track volume from the terminal",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio :: Players",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "test": [
            "pytest>=7.4.3",
        ],
        "dev": [
            "pytest>=7.4.3",
            "black>=23.11.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "playlist-player=playlist_player.main:cli",
        ],
    },
    keywords="audio player playlist terminal cli volume",
)
