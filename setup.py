import setuptools

from pyscreenlogic import __version__

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="pyscreenlogic",
    version=__version__,
    author="pyScreenLogic Contributors",
    description="Python module to access Pentair ScreenLogic pool and spa gateways",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=["pyscreenlogic.tests", "pyscreenlogic.tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        'python-dotenv',
        'python-dateutil',
    ],
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
