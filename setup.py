from setuptools import setup, find_packages


setup(
    name="rfarc",
    version="0.1",
    packages=find_packages(include=["rfarc", "rfarc.*"]),
    description="Codecs and CLI for Rune Factory 3 .arc archives and their TEXT string tables.",
    python_requires=">=3.8",
    install_requires=[],
    entry_points={
        "console_scripts": [
            "rfarc=rfarc.cli:main",
        ]
    },
)
