# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="autodocument",
    version="0.3.0",
    description="Bottom-up, per-directory documentation, test plan and code review generation with LLMs",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["autodocument*"]),
    python_requires=">=3.9",
    install_requires=[
        "requests",     # OpenRouter chat-completions transport
        "anthropic",    # Direct Claude backend
        "tiktoken",     # Prompt size estimation
        "pathspec",     # .gitignore semantics
    ],
    extras_require={
        "test": ["pytest", "httpx"],
    },
    entry_points={
        'console_scripts': [
            'autodocument=autodocument.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
