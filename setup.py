"""Setup configuration for the Anekbot Discord bot."""

from setuptools import setup, find_packages

setup(
    name="anekbot",
    version="0.1.0",
    description="A Discord bot that samples aneks from channels and serves random ones on demand",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord>=2.6",
        "prompt_toolkit>=3.0",
        "PyYAML>=6.0",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "anekbot=anekbot.main:main",
        ],
    },
)
