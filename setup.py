"""
Setup configuration for the restmock package.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="restmock",
    version="0.1.0",
    author="restmock Contributors",
    author_email="contributors@restmock.example.com",
    description="Service virtualization for behavior-driven tests of resource-oriented REST clients",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/restmock",
    packages=find_packages(include=["restmock", "restmock.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Software Development :: Testing :: Mocking",
        "Framework :: Pytest",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov",
            "ruff",
            "mypy",
        ],
        "testing": ["pytest>=6.0"],
    },
    project_urls={
        "Bug Reports": "https://github.com/yourusername/restmock/issues",
        "Source": "https://github.com/yourusername/restmock",
    },
)
