"""
voicelink-core Setup Configuration.

Multi-vendor voice-AI integration layer (Retell, Vapi, Bland).
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="voicelink-core",
    version="1.0.0",
    author="VoiceLink",
    description="Vendor clients, normalization and webhook reconciliation for voice-AI platforms",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Communications :: Telephony",
        "Typing :: Typed",
    ],
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "httpx>=0.25.0",
        "aiohttp>=3.8.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "structlog>=23.1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "respx>=0.20.0",
            "mypy>=1.0.0",
            "ruff>=0.1.0",
            "black>=23.0.0",
        ],
    },
    package_data={
        "voicelink_core": ["py.typed"],
    },
    keywords=[
        "voice",
        "ai",
        "retell",
        "vapi",
        "bland",
        "voice-agents",
        "webhooks",
    ],
)
