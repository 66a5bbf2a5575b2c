from setuptools import setup, find_packages

setup(
    name="httpgen",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiohttp",
        "tqdm",
        "yarl"
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["httpgen=httpgen.cli:main"],
    },
    description="Concurrent HTTP load generator with bounded concurrency and latency statistics.",
    long_description=open('README.md').read(),
    long_description_content_type="text/markdown",
    author="Ludwig",
    author_email="yuzeliu@gmail.com",
    url=None,
    python_requires=">=3.9",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
