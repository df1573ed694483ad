import os
from setuptools import setup, find_packages

setup(
    name="devsig",
    version="1.0.0",
    description="devsig — infer physical device models from display, GPU and analytics signals",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="devsig",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "psutil>=5.9.0",
        "click>=8.0.0",
        "pandas>=1.5.0",
        "pyarrow>=10.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "devsig=devsig.cli:main",
        ],
    },
    python_requires=">=3.9",
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
