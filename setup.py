"""
/setup.py

Packaging for the variant insights analytics library.
"""

import setuptools

with open("requirements.txt", "r", encoding="utf-8") as file:
    requirements = file.read().splitlines()

setuptools.setup(
    name="variant-insights",
    version="0.0.1",
    description="Coverage and agreement analytics for collaborator-tagged plot points",
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src"),
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "variant_insights = insights.commands:main",
        ]
    },
)
