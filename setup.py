from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="monopack",
    version="1.0.0",
    author="Seppo Pakonen",
    author_email="seppo.pakonen@gmail.com",
    description="monopack - materialize yarn workspace dependencies for per-package packaging",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "monopack=monopack:main",
        ],
    },
    install_requires=[
        "toml>=0.10.0",
        "pyfiglet>=0.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
)
