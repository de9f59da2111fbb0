"""
Setup script for animal-academy.

Animal Academy turns any concept into an illustrated lesson explained by
anthropomorphic animal professors:

1. Lesson Text - Quote, explanation, APA reading list, flashcards, mind map (Gemini)
2. Comic Strip - One Imagen illustration per scripted panel
3. Grounding - Optional uploaded document as primary or supplementary source

The 'academy' command is the entry point.
"""

from setuptools import find_namespace_packages, setup

setup(
    name="animal-academy",
    version="0.1.0",
    description="Illustrated lessons explained by animal professors, generated with Gemini and Imagen",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Animal Academy",
    packages=find_namespace_packages(include=["src", "src.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # AI
        "google-genai>=1.0.0",
        # HTTP
        "httpx>=0.25.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "academy=src.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="education lessons gemini imagen comics flashcards cli",
)
