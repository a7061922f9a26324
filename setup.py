from setuptools import setup, find_packages

setup(
    name="sdensemble",
    version="0.1.0",
    description="Tidy tables and replicate summaries for simulation ensembles",
    
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "scipy",
        "pandas",
        "pydantic>=2",
        "structlog",
        "tomli; python_version < '3.11'",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
