from setuptools import setup, find_packages

setup(
    name="teamup",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        # passlib's bcrypt backend breaks on bcrypt>=4.1
        "bcrypt<4.1",
        "python-multipart",
        "pydantic[email]",
        "pydantic-settings",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
