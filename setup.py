"""Setup script for Code Buddy."""
from setuptools import setup, find_packages

setup(
    name="codebuddy-editor",
    version="0.1.0",
    description="Kid-friendly code editor backend: heuristic diagnostics, fixes, code execution and AI help",
    author="Your Name",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "flask>=3.0.0",
        "werkzeug>=3.0.0",
        "requests>=2.31.0",
        "openai>=1.0.0",
        "google-genai>=1.0.0",
        "python-dotenv>=1.0.0",
        "typer>=0.9.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "codebuddy=codebuddy.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Education",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
