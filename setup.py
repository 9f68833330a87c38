#
# Copyright 2024 icubuild Project. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

from setuptools import setup, find_packages

ALL_PROGRAM_ENTRIES = ["icubuild = icubuild.cli:main"]

with open("README.md", "r") as f:
    long_description = f.read()

setup(
    name="icubuild",
    version="1.0.0",
    description="Cross-compile collation-only ICU4C static libraries.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="icubuild Project Authors",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "icubuild": [
            "templates/project/*.yml",
            "templates/project/*.jinja",
            "templates/project/download/*",
        ],
    },
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "copier>=9.2.0",
        'tomli>=2.0.0; python_version < "3.11"',
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: Implementation :: CPython",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS :: MacOS X",
    ],
    zip_safe=False,
    entry_points={"console_scripts": ALL_PROGRAM_ENTRIES},
)
