import os

from setuptools import find_packages, setup

setup(
    name="mosaic-types",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.10.6,<3.0.0",
        "hypothesis>=6.100",
    ],
    extras_require={
        "test": ["pytest>=8.0"],
    },
    author="Mosaic Contributors",
    description="Type descriptors that decode, validate, encode and generate JSON-shaped data",
    long_description=open("README.md").read()
    if os.path.exists("README.md")
    else "",
    long_description_content_type="text/markdown",
)
