#!/usr/bin/env python
"""
Setup script for remote-image
"""

from setuptools import setup, find_packages

setup(
    name="remote-image",
    version="1.0.0",
    description="Remote image loading with HTTP caching, placeholder/failure phases and animation hints",
    author="remote-image Contributors",
    license="MIT",
    package_dir={"": "src/python"},
    packages=find_packages("src/python"),
    python_requires=">=3.9",
    install_requires=[
        "hishel>=0.1.1,<1.0",
        "httpcore>=1.0",
        "httpx>=0.28",
        "Pillow>=9.1.0",
        "PySide6>=6.5.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0"],
        "test": ["pytest>=7.0"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
