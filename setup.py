# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Setup configuration for the ForgeFlow workflow backend
"""

from setuptools import setup, find_packages

setup(
    name="forgeflow",
    version="0.1.0",
    description="DAG workflow execution engine and API",
    package_dir={"": "backend"},
    packages=find_packages("backend", exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "pydantic>=2.5.0",
        "httpx>=0.27.0",
        "pyyaml>=6.0",
        "aiofiles>=23.2.0",
        "python-dotenv>=1.0.0",
        "openai>=1.30.0",
        "anthropic>=0.30.0,<1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.23.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "forgeflow-server=forgeflow.main:run",
        ]
    },
)
