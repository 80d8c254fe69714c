from setuptools import setup, find_packages

setup(
    name="unipac",
    version="0.1.0",
    description="unipac: one command vocabulary for pacman and the AUR",
    author="Alkama Sudad",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=["rich", "psutil", "pygit2", "requests"],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "unipac=unipac.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX :: Linux",
    ],
)
