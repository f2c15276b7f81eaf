import os.path
import pathlib
from os import path

from setuptools import setup

from cwl2argo.version import VERSION

this_directory = path.abspath(path.dirname(__file__))
with open(path.join(this_directory, "README.md"), encoding="utf-8") as f:
    long_description = f.read()
with open(os.path.join(pathlib.Path(__file__).parent, "requirements.txt")) as f:
    install_requires = f.read().splitlines()
with open(os.path.join(pathlib.Path(__file__).parent, "test-requirements.txt")) as f:
    tests_require = f.read().splitlines()

setup(
    name="cwl2argo",
    version=VERSION,
    packages=[
        "cwl2argo",
        "cwl2argo.argo",
        "cwl2argo.config",
        "cwl2argo.core",
        "cwl2argo.cwl",
    ],
    package_data={
        "cwl2argo.config": ["schemas/*.json"],
    },
    include_package_data=True,
    description="CWL CommandLineTool to Argo Workflow translator",
    long_description=long_description,
    long_description_content_type="text/markdown",
    install_requires=install_requires,
    extras_require={
        "test": tests_require,
    },
    tests_require=tests_require,
    python_requires=">=3.10, <4",
    entry_points={
        "console_scripts": [
            "cwl2argo=cwl2argo.main:run",
        ]
    },
    zip_safe=True,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Operating System :: POSIX",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3.10",
        "Topic :: Scientific/Engineering",
        "Topic :: System :: Distributed Computing",
    ],
)
