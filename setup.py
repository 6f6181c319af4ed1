from setuptools import setup, find_packages

setup(
    name="tango-puzzles",
    version="1.0.0",
    description="Tango (Sun/Moon) Puzzle Generator & Logic Solver",
    packages=find_packages(include=["tango", "tango.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.21.0",
        "matplotlib>=3.6.0",
        "seaborn>=0.12.0",
        "tqdm>=4.62.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "tango=tango.cli:main",
        ],
    },
)
