# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- STATE & CONFIG ---
    "pydantic>=2.0.0",
    "python-dotenv>=1.0.0",
    "pyyaml>=6.0.0",
]

extras_require = {
    # --- TESTS---
    "test": [
        "pytest-asyncio>=0.23",
        "pytest",
    ],
}

setup(
    name="selectkit",
    version="0.1.0",
    description="Reactive selectable-list state container",
    packages=find_packages(include=["selectkit", "selectkit.*"]),
    include_package_data=True,
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.11",
)
