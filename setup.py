from setuptools import setup, find_packages

setup(
    name="copilot-commit",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "g4f",
        "rich",
    ],
    extras_require={
        "test": [
            "pytest",
            "GitPython",
        ],
    },
    entry_points={
        'console_scripts': [
            'copilot-commit=copilot_commit.cli:main_cli',
        ],
    },
    author="",
    author_email="",
    description="Stage, commit with an AI-suggested conventional commit message, and push",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    url="",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Version Control :: Git",
    ],
    python_requires=">=3.8",
)
