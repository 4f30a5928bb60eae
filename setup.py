# setup.py
from setuptools import setup, find_packages

setup(
    name="a11y_scout",
    version="0.1.0",
    description="Асинхронный краулер страниц для аудита доступности A11yScout",
    packages=find_packages(include=["a11y_scout", "a11y_scout.*"]),
    package_data={"a11y_scout.report": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "jinja2>=3.1",
        "playwright>=1.40",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["a11y-scout=a11y_scout.cli:cli"],
    },
    python_requires=">=3.11",
)
