# setup.py
from setuptools import setup, find_packages

setup(
    name="paycycle",
    version="0.1.0",
    description="Per-user transaction store with pay-period (Friday to Thursday) weekly reports",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "click>=7.0",
        "pyyaml>=5.3",
        "python-dotenv>=0.19",
        "xlsxwriter>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "openpyxl>=3.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "paycycle=paycycle.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
