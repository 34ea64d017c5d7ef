from __future__ import annotations

from setuptools import find_packages, setup

_PACKAGES = ["config", "domain", "application", "infrastructure", "server"]

setup(
    name="streaming-miniapp-backend",
    version="0.1.0",
    # Repo convention: backend code lives under `backend/` and is imported as
    # top-level packages (`import domain`, `import server`).
    package_dir={"": "backend"},
    packages=find_packages(
        where="backend",
        include=_PACKAGES + [f"{p}.*" for p in _PACKAGES],
    ),
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn>=0.27",
        "pydantic>=2.6,<3",
        "asyncpg>=0.29",
        "aiohttp>=3.9",
        "python-dotenv>=1.0",
        "pyjwt>=2.8",
    ],
    extras_require={
        # TestClient needs httpx; tests are unittest-style, collected by pytest.
        "test": ["pytest>=8.0", "httpx>=0.27"],
    },
)
