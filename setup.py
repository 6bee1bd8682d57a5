import os
from pathlib import Path

from setuptools import find_packages, setup

with open(os.path.join("src", "smtinterface", "_version.py")) as version_file:
    version = version_file.readlines()[-1].split()[-1].strip("\"'")

# read the contents of your README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

setup(
    name="smtinterface",
    version=version,
    description="Interactive SMTLIB2 client for external SMT solvers",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="",
    author="Dan Bryce",
    author_email="dbryce@sift.net",
    license="MIT",
    packages=find_packages("src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "pysmt",
        "pydantic>=2",
        "pyparsing>=3",
    ],
    extras_require={"z3": ["z3-solver"], "test": ["pytest"]},
    zip_safe=False,
)
