from setuptools import setup, find_packages

setup(
    name="pet-climatology",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "numpy>=1.21.0",
        "pandas>=1.3.0",
        "scipy>=1.7.0",
        "xarray>=2022.6.0",
        "shapely>=2.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    author="PET Climatology Development Team",
    description="FAO-56 Penman-Monteith PET climatology for gridded daily fields",
    python_requires=">=3.8",
)
