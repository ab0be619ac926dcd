from setuptools import setup, find_packages

setup(
    name="script-extraction-service",
    version="1.0.0",
    packages=find_packages(include=["script_extraction_service*", "api"]),
    py_modules=["extract_script"],
    install_requires=[
        "requests>=2.31.0",
        "pydantic>=2.10.3",
        "python-dotenv>=1.0.1",
        "loguru>=0.7.2",
        "fastapi>=0.115.0",
        "uvicorn>=0.30.0",
        "python-multipart>=0.0.9",
    ],
    extras_require={
        "test": [
            "pytest>=8.0.0",
            "httpx>=0.27.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "extract-script=extract_script:main",
        ],
    },
    python_requires=">=3.11",
)
