from setuptools import setup

with open("tplcontroller/version.py") as f:
    exec(f.read())

setup(
    name="python-tplcontroller",
    version=__version__,  # type: ignore # noqa: F821
    description="Python API for the web management of TP-Link devices",
    url="https://github.com/python-tplcontroller/python-tplcontroller",
    author="",
    author_email="",
    license="MIT",
    packages=["tplcontroller"],
    install_requires=[
        "aiohttp>=3",
        "asyncclick>=8.1.7",
        "mashumaro>=3.11",
        "orjson>=3.9.1",
        "rich>=13",
        "yarl>=1.9",
    ],
    extras_require={
        "test": [
            "pytest>=8",
            "pytest-asyncio>=0.23",
            "pytest-mock>=3.12",
        ],
    },
    python_requires=">=3.11",
    entry_points={"console_scripts": ["tplcontroller=tplcontroller.cli:cli"]},
    zip_safe=False,
)
