import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="json_schema_to_ts",
    version="1.0.0",
    description="Generate TypeScript type declarations and factory functions from JSON Schema definitions",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Topic :: Text Processing",
        "Intended Audience :: Developers",
    ],
    keywords="json schema code generation typescript interface factory template",
    url="https://github.com/madlag/json_schema_to_ts",
    author="François Lagunas",
    author_email="francois.lagunas@gmail.com",
    license="MIT",
    packages=find_packages(),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0.0",
        "jinja2>=3.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "json_schema_to_ts=json_schema_to_ts.json_schema_to_ts:json_schema_to_ts",
        ],
    },
    include_package_data=True,
    package_data={
        "json_schema_to_ts": ["templates/**/*.jinja2"],
    },
    zip_safe=False,
)
