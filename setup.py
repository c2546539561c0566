#!/usr/bin/env python3

"""Setup script for the multiple structure alignment model package."""

from setuptools import setup, find_packages

setup(
    name="strucalign",
    version="0.1.0",
    description="Multiple structure alignment model and pairwise alignment conversion",
    author="Adam",
    author_email="adam@example.com",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "numpy>=1.20.0",
        "scipy>=1.7.0",
        "biopython>=1.79",
    ],
    extras_require={
        "tests": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "strucalign-convert=strucalign.presentation.cli.convert_alignment:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
)
