from pathlib import Path

from setuptools import find_packages
from setuptools import setup


HERE = Path(__file__).resolve().parent


def get_long_description():
    readme = HERE / "README.md"
    if not readme.exists():
        return ""
    with open(readme, "r", encoding="utf-8") as f:
        return f.read()


setup(
    name="tracewire",
    version="0.1.0",
    description="Tracing, breadcrumbs and failed request reporting for outgoing HTTP calls",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    license="BSD-3-Clause",
    packages=find_packages(exclude=["tests*", "benchmarks*", "scripts*"]),
    package_data={
        "tracewire": ["py.typed"],
    },
    python_requires=">=3.8",
    install_requires=[
        "attrs>=20",
        "envier>=0.5",
        "requests>=2.20",
        "wrapt>=1.14,<2",
    ],
    extras_require={
        "tests": [
            "mock",
            "pytest",
        ],
    },
    zip_safe=False,
)
