from setuptools import find_packages, setup


setup(
    name="livetpl",
    version="0.3.0",
    description="Live multi-point text templating engine with interactive input and previews",
    author="GAHEOS",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src", include=["livetpl", "livetpl.*"]),
    install_requires=[
        "prompt_toolkit>=3.0",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
)
