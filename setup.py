from setuptools import setup, find_packages

setup(
    name="svgslim",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"svgslim": ["config/*.yaml"]},
    python_requires=">=3.8",
    install_requires=[
        "lxml",
        "numpy",
        "svgpathtools",
        "pyyaml",
    ],
    extras_require={
        "api": ["fastapi", "uvicorn", "python-multipart"],
        "test": ["pytest", "httpx", "fastapi", "python-multipart"],
    },
    entry_points={
        "console_scripts": [
            "svgslim=svgslim.main:main",
        ],
    },
)
