# setup.py
from setuptools import setup, find_packages

setup(
    name="lispdm",
    version="0.1.0",
    description="A tree-walking interpreter for a small Scheme-like Lisp",
    packages=find_packages(include=["lispdm", "lispdm.*"]),
    package_data={"lispdm": ["prelude/*.scm"]},
    python_requires=">=3.11",
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
