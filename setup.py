#!/usr/bin/env python3

import setuptools

if __name__ == "__main__":
    setuptools.setup(
        name="hopmap",
        version="0.1.0",
        description="Locate traceroute hops on a map from hostname heuristics and address geolocation",
        python_requires=">=3.8",
        packages=setuptools.find_packages(include=["hopmap", "hopmap.*"]),
        package_data={"hopmap": ["data/*.json"]},
        install_requires=[
            "flask>=2.0",
            "requests>=2.25",
            "rich>=12.0",
            "typer>=0.9",
            "urllib3>=1.26",
            "werkzeug>=2.0",
        ],
        extras_require={
            "test": ["pytest>=7.0"],
        },
        entry_points={
            "console_scripts": [
                "hopmap=hopmap.cli.cli:app",
            ]
        },
    )
