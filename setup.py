from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="nestspec",
    version="0.1.0",
    description="Result aggregation and reporting for nested, repeatedly executed specs.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Software Development :: Testing",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"nestspec": ["schemas/*.json"]},
    python_requires=">=3.10",
    install_requires=["pyyaml", "jsonschema"],
    extras_require={"test": ["pytest"]},
    tests_require=["pytest"],
)
