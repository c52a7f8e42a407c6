from setuptools import setup, find_packages

setup(
    name="potfloods",
    version="0.1.0",
    description="Independent Peaks Over Threshold (POT) flood extraction from daily streamflow",
    author="Hydrology Team",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.22",
        "pandas>=2.0",
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "python-dotenv>=1.0",
        "SQLAlchemy>=2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
)
