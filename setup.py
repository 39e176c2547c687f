# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

import os
import re

from setuptools import find_packages, setup


def read_version():
    init_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "vminfer", "__init__.py")
    with open(init_path, encoding="utf-8") as f:
        match = re.search(r'^__version__ = "([^"]+)"', f.read(), re.MULTILINE)
    if match is None:
        raise RuntimeError("Unable to find __version__ in vminfer/__init__.py")
    return match.group(1)


setup(
    name="vminfer",
    version=read_version(),
    description="Single-pass classification with compiled Relax VM modules",
    author="Wahyu Ardiansyah",
    license="Apache-2.0",
    python_requires=">=3.9",
    packages=find_packages(include=["vminfer", "vminfer.*"]),
    install_requires=[
        "numpy>=1.21",
    ],
    extras_require={
        "tvm": ["apache-tvm"],
        "test": ["pytest>=7.0", "hypothesis>=6.0"],
    },
    entry_points={
        "console_scripts": [
            "vminfer=vminfer.cli:main",
        ],
    },
)
