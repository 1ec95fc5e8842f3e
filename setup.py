from setuptools import setup, find_packages

setup(
    name="folio",
    version="0.1.0",
    description="Portfolio site with a Spotify now-playing widget",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"folio.gateway": ["templates/*.html"]},
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0.0",
        "fastapi>=0.109.0",
        "uvicorn[standard]>=0.27.0",
        "jinja2>=3.1.0",
        "httpx>=0.25.0",
        "pydantic>=2.0.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0.0", "pytest-cov>=4.0.0"],
    },
    entry_points={
        "console_scripts": [
            "folio=folio.service:main",
            "folio-token=folio.token_helper:main",
        ],
    },
)
