"""
Distribution Engine — distributional statistics and mobility forecasts
for weighted agent populations.
"""

from setuptools import setup, find_packages

setup(
    name="distribution-engine",
    version="0.1.0",
    description="Quantile shares and means, Gini coefficients and bucket-mobility "
                "forecasts over weighted populations with sparse transition matrices.",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24",
        "scipy>=1.10",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
        ],
    },
    entry_points={
        "console_scripts": [
            "distribution-engine=distribution_engine.cli:main",
        ],
    },
)
