"""
setup.py for the critline package.

critline is pure Python on top of numpy and scipy; no compiled extension is built.

Install for development:
    pip install -e ".[dev]"

Run the test-suite:
    pytest tests/python
"""

from setuptools import find_packages, setup

setup(
    name="critline",
    version="0.1.0",
    description="Critical Line Algorithm mean-variance optimizer with a two-phase simplex front end",
    package_dir={"": "python"},
    packages=find_packages(where="python"),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20",
        "scipy>=1.7",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "hypothesis>=6.0",
        ],
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
            "hypothesis>=6.0",
            "black>=23.0",
            "ruff>=0.1.0",
            "mypy>=1.0",
        ],
    },
)
