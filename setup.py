from setuptools import setup, find_packages

setup(
    name="gitscrape",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "colorama",
        "requests",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "gitscrape=gitscrape.main:main",
        ],
    },
)
