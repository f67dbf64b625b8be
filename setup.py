# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="libset",
    version="0.2.0",
    description="Declarative application settings directories with TOML, JSON, RON and plain text values",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["libset", "libset.*"]),
    python_requires=">=3.11",
    install_requires=[
        "platformdirs>=3.0",  # OS-conventional config/data directories
        "tomli-w>=1.0",  # TOML writer (reading uses the stdlib tomllib)
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'libset=libset.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
