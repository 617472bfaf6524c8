"""Setup script for the ward records package."""

from setuptools import setup, find_namespace_packages

setup(
    name="ward-records",
    version="1.0.0",
    description="Ward records - patient case sheets, equipment logs and duty charts on an append-only sheet store",
    author="Ward Records Team",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["shared*", "sheet_gateway*", "proxy_relay*", "ward_forms*"]),
    py_modules=["config"],
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "uvicorn[standard]",
        "pydantic",
        "sqlalchemy",
        "requests",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-cov",
            "httpx",
        ],
        "dev": [
            "black",
            "flake8",
            "mypy",
            "pre-commit",
        ],
    },
    entry_points={
        "console_scripts": [
            "ward-gateway=sheet_gateway.entrypoints.gateway_api:main",
            "ward-proxy=proxy_relay.entrypoints.proxy_api:main",
            "ward-records=ward_forms.entrypoints.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Healthcare Industry",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Medical Science Apps.",
    ],
)
