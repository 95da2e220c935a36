from setuptools import setup, find_packages

setup(
    name="taxometr",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings",
        "googlemaps",
        "aiohttp",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ],
    },
    python_requires=">=3.8",
)
