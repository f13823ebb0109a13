import os

from setuptools import find_packages
from setuptools import setup


HERE = os.path.dirname(os.path.abspath(__file__))


def get_version():
    version = {}
    with open(os.path.join(HERE, "xraytrace", "_version.py")) as f:
        exec(f.read(), version)
    return version["__version__"]


long_description = """
# xraytrace

`xraytrace` converts finished tracing spans into AWS X-Ray segments and sends
them over UDP to the local X-Ray daemon.
"""


setup(
    name="xraytrace",
    version=get_version(),
    description="Span to AWS X-Ray segment reporter",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="BSD",
    packages=find_packages(exclude=["tests*"]),
    python_requires=">=3.8",
    zip_safe=False,
    install_requires=[
        "attrs>=20",
        "envier>=0.5,<1.0",
    ],
    extras_require={
        "test": [
            "pytest",
            "mock",
        ],
    },
    classifiers=[
        "Programming Language :: Python",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
