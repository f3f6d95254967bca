# setup.py
from setuptools import setup, find_packages

setup(
    name="pluglisp",
    version="0.1.0",
    description="A Lisp interpreter with a plugin-based builtin registry",
    packages=find_packages(include=["pluglisp", "pluglisp.*", "pluglisp_server", "pluglisp_server.*"]),
    python_requires=">=3.10",
    install_requires=[
        "httpx",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": [
            "pluglisp=pluglisp.repl:main",
            "pluglisp-server=pluglisp_server.repl_server:main",
        ],
    },
    zip_safe=False,
)
