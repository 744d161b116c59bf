from setuptools import setup, find_packages

# Read version from __version__.py without importing the package
version_file = {}
with open("vidscribe/__version__.py") as fp:
    exec(fp.read(), version_file)
__version__ = version_file['__version__']

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

python_requires = ">=3.9"

install_requires = [
    # Core Dependencies
    "ffmpeg-python>=0.2.0",   # ffmpeg bindings for audio extraction and burn-in
    "google-genai>=1.39.0",   # Gemini transcription
    "httpx",                  # Transport errors raised through google-genai
    "pydantic>=2.0,<3.0",     # Settings and transcript schema
    "python-dotenv>=1.0",     # GOOGLE_API_KEY from .env
    "tqdm",
    "colorama",
]

extras_require = {
    "test": [
        "pytest>=7.0",
    ],
}

classifiers = [
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.9",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Operating System :: OS Independent",
]

setup(
    name="vidscribe",
    version=__version__,
    description="Transcribe videos with Gemini and burn the subtitles into a copy",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    packages=find_packages(include=["vidscribe", "vidscribe.*"]),
    classifiers=classifiers,
    python_requires=python_requires,
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "vidscribe=vidscribe.cli:main",
        ],
    },
    zip_safe=False,
)
