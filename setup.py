#!/usr/bin/env python3

import os
import re

from setuptools import setup


def read(fname):
    with open(os.path.join(os.path.dirname(__file__), fname)) as f:
        return f.read()


def version():
    match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", read("mergediff/__init__.py"), re.M)
    if not match:
        raise RuntimeError("failed to parse version")
    return match.group(1)


install_requires = [
    "wrapt >= 1.14.0",
]

tests_require = [
    "pytest >= 7.0",
]

classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "License :: OSI Approved :: Mozilla Public License 2.0 (MPL 2.0)",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

setup(
    name="mergediff",
    version=version(),
    description="Generate JSON Merge Patch (RFC 7386) documents from JSON differences.",
    long_description=read("README.rst"),
    license="Mozilla Public License 2.0",
    classifiers=classifiers,
    packages=["mergediff"],
    python_requires=">= 3.10",
    install_requires=install_requires,
    extras_require={"test": tests_require},
    keywords="json merge patch diff rfc7386",
)
