from setuptools import setup, find_packages

'''
Notes: This is the setup file for the PostureProbe inventory probe.
It defines the package metadata and dependencies required for installation.
The live state provider runs on Windows; checks and tests run anywhere.
'''

setup(
    name = "PostureProbe",
    version = "1.0.0",
    description= "PostureProbe - Security posture inventory checks for Windows hosts",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires='>=3.10',
    install_requires=[
        # Core
        "pydantic>=2.0",
        "PyYAML",
        "python-dotenv",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
