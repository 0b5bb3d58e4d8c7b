"""Setup file for the body-com project."""

from setuptools import find_packages, setup

setup(
    name="body-com",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "numpy",
        "pandas",
        "opencv-python",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.10",
)
