# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="notetree",
    version="1.0.0",
    description="Hierarchical note store with shadow-tree change tracking and pluggable storage",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["notetree*"]),
    python_requires=">=3.9",
    install_requires=[
        "requests",
        "python-jose",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
