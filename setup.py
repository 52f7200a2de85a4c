from setuptools import setup, find_packages

setup(
    name="tmx-cwb",
    version="0.3.0",
    description="Convert TMX translation memories to and from aligned CWB corpora",
    author="TMX-CWB Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pyyaml>=6.0",
        "python-dotenv>=1.0.0",
        "jinja2>=3.1.2",
        "pydantic>=2.0.0",
        "nltk>=3.8",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "tmx2cwb=tmx_cwb.cli:tmx2cwb",
            "cwb2tmx=tmx_cwb.cli:cwb2tmx",
        ],
    },
)
