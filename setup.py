"""Setup configuration for the store-service project."""

from setuptools import setup, find_packages

setup(
    name="store-service",
    version="1.0.0",
    description="E-commerce store backend with FastAPI, Redis carts, and Kafka catalog events",
    author="Your Name",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"services.store_service": ["templates/*.html"]},
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.109.0",
        "uvicorn>=0.27.0",
        "redis>=5.0.0",
        "confluent-kafka>=2.3.0",
        "sqlalchemy>=2.0.23",
        "psycopg2-binary>=2.9.9",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "jinja2>=3.1.2",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.26.0",
            "fakeredis>=2.20.0",
        ],
    },
)
