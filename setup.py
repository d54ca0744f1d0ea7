"""Setup configuration for the ccm-conformance tool."""

from setuptools import setup, find_packages

setup(
    name="ccm-conformance",
    version="0.1.0",
    description="Cloud-agnostic conformance tests for cloud controller providers",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "requests>=2.31.0",
        "pyyaml>=6.0",
        "click>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ccm-conformance=ccm_conformance.cli:main",
        ],
    },
)
