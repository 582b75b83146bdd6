#!/usr/bin/env python

from setuptools import setup

setup(
    name="rbsfold",
    version="20261019",
    packages=["rbsfold"],
    install_requires=["ViennaRNA", "pyyaml", "typing_extensions", "numpy"],
    extras_require={"test": ["pytest"]},
    include_package_data=True,
    package_data={"rbsfold": ["py.typed"]},
    author="rbsfold contributors",
    description="Ribosome binding site energetics from ViennaRNA folds",
    python_requires=">=3.8",
    zip_safe=False,
)
