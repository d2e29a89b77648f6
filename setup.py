#!/usr/bin/env python3
"""
Setup script for SOC Portal (API server + session CLI)

Install with:
    pip install -e .

With test tooling:
    pip install -e ".[dev]"
"""

from setuptools import setup
from pathlib import Path

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = ""
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")

# Server dependencies
server_requirements = [
    "fastapi>=0.109.0",
    "uvicorn[standard]>=0.27.0",
    "sqlalchemy[asyncio]>=2.0.25",
    "aiosqlite>=0.19.0",
    "asyncpg>=0.29.0",
    "pydantic>=2.5.0",
    "pydantic-settings>=2.1.0",
    "bcrypt>=4.1.0",
    "slowapi>=0.1.9",
    "python-multipart>=0.0.6",
    "aiofiles>=23.2.1",
]

# CLI dependencies
cli_requirements = [
    "httpx>=0.26.0",
    "rich>=13.7.0",
    "python-dotenv>=1.0.0",
]

setup(
    name="soc-portal",
    version="1.0.0",
    description="SOC Portal - session lifecycle, auth gate and feature API with a session-tracking CLI",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="SOC Portal Team",
    license="MIT",
    packages=[
        "soc_portal",
        "soc_portal.api",
        "soc_portal.api.v1",
        "soc_portal.api.v1.endpoints",
        "soc_portal.core",
        "soc_portal.models",
        "soc_portal.modules",
        "soc_portal.modules.auth",
        "soc_portal.schemas",
        "soc_portal.services",
        "soc_cli",
    ],
    package_dir={"soc_portal": "backend/soc_portal"},
    python_requires=">=3.9",
    install_requires=server_requirements + cli_requirements,
    extras_require={
        "cli": cli_requirements,
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
            "faker>=22.0.0",
            "black>=24.1.0",
            "isort>=5.13.0",
            "mypy>=1.8.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "soc-portal=soc_cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Web Environment",
        "Framework :: FastAPI",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="soc portal session authentication fastapi",
)
