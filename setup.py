# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="typebuild",
    version="0.1.0",
    description="Post-compile pipeline that turns esbuild output of a TypeScript ES module project into a runnable tree",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["typebuild*"]),
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'typebuild=typebuild.interface.cli.app:main',  # Runs the build from the project root
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
