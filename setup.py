# setup.py
from setuptools import setup, find_packages

setup(
    name="flatten-doc",
    version="0.1.0",
    description="Flattens a Go package documentation tree into a single Markdown file",
    packages=find_packages(include=["flatten_doc", "flatten_doc.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "markdownify>=1.0",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.1",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "flatten-doc=flatten_doc.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
