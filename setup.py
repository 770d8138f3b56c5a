# setup.py
from setuptools import setup, find_packages

setup(
    name="link_scout",
    version="0.1.0",
    description="Поиск битых ссылок на странице или по всему сайту",
    packages=find_packages(exclude=("tests", "tests.*")),  # автоматически найдёт папку link_scout
    package_data={"link_scout": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "Jinja2>=3.1",
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
        "console_scripts": [
            "link-scout=link_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
