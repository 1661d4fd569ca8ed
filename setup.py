"""
Setup script for the barcode scan resolution package.

This package provides the barcode scanning pipeline of the inventory
dashboard: scanner/manual input classification, debouncing, cached and
retried item lookups, and success feedback.
"""
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="barcode-scan-resolver",
    version="1.0.0",
    author="Inventory Dashboard Team",
    description="Barcode scan resolution pipeline for the inventory dashboard",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Office/Business",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.11",
    install_requires=[
        # HTTP client for the inventory API
        "requests>=2.31.0",

        # CloudWatch metrics
        "boto3>=1.28.85",
        "botocore>=1.31.85",
    ],
    extras_require={
        "dev": [
            # Testing
            "pytest>=7.4.3",
            "pytest-cov>=4.1.0",
            "pytest-asyncio>=0.21.0",

            # Code quality
            "black>=23.11.0",
            "flake8>=6.1.0",
            "mypy>=1.7.1",
        ],
    },
    zip_safe=False,
)
