"""Setup configuration for the Orchard Discord Bot."""

from setuptools import setup, find_packages

setup(
    name="orchard",
    version="0.0.1",
    description="A Discord bot for the AppleBlox community that analyzes diagnostic bundles",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord>=2.6",
        "python-dotenv",
        "PyYAML",
        "prompt_toolkit",
        "jsonschema",
        "requests",
        "openai>=1.0",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "orchard=orchard.main:main",
        ],
    },
)
