from setuptools import setup, find_packages
import os

# Read version from __init__.py
def get_version():
    """Get version from openops/__init__.py"""
    init_file = os.path.join(os.path.dirname(__file__), "openops", "__init__.py")
    with open(init_file, "r") as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"\'')
    raise RuntimeError("Unable to find version string.")

# Installation Examples:
# - Base package only: pip install openops
# - With test tooling: pip install "openops[dev]"

extras_require = {
    # Development dependencies (CPU-only testing)
    "dev": [
        "pytest>=7.4.0",
        "pytest-cov>=4.1.0",
        "coverage>=7.3.2",
    ],
}

setup(
    name="openops",
    version=get_version(),
    description="Plugin-based special ops for N-dimensional image processing",
    long_description=open("README.md", "r", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Image Processing",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
    keywords="image-processing, plugins, ops, n-dimensional",
    packages=find_packages(include=["openops", "openops.*"]),
    install_requires=[
        # Core image processing and scientific computing
        "numpy>=1.26.4",
        "scikit-image>=0.25.2",
    ],
    extras_require=extras_require,
)
