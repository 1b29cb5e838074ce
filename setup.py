from __future__ import annotations

from setuptools import find_packages, setup

setup(
    name="conversation-memo",
    version="0.1.0",
    # Repo convention: backend code lives under `backend/` and is imported as
    # top-level layers (`server`, `application`, `domain`, `infrastructure`, `config`).
    package_dir={"": "backend"},
    packages=find_packages(
        where="backend",
        include=[
            "server",
            "server.*",
            "application",
            "application.*",
            "domain",
            "domain.*",
            "infrastructure",
            "infrastructure.*",
            "config",
            "config.*",
        ],
    ),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.10",
        "fastapi>=0.115",
        "uvicorn>=0.30",
        "python-dotenv>=1.0",
        "asyncpg>=0.29",
        "pyjwt>=2.8",
        "prometheus-client>=0.20",
    ],
    extras_require={
        # fastapi.testclient needs httpx.
        "test": ["httpx>=0.27"],
    },
)
