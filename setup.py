#!/usr/bin/env python3
"""
Setup script for Event OCR
Turns photos of event flyers and posters into draft event records.
"""

from setuptools import setup, find_packages
import os

# Read the README file for long description
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "Event OCR - Extract event drafts from flyer and poster images."

# Read requirements from requirements.txt
def read_requirements():
    requirements_path = os.path.join(os.path.dirname(__file__), 'requirements.txt')
    if os.path.exists(requirements_path):
        with open(requirements_path, 'r', encoding='utf-8') as f:
            return [line.strip() for line in f if line.strip() and not line.startswith('#')]
    return []

setup(
    name="event-ocr",
    version="1.0.0",
    author="Ozayn",
    author_email="your-email@example.com",
    description="Extract event name, dates, times, location and links from flyer images",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    url="https://github.com/ozayn/planner",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["app"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
        "Topic :: Scientific/Engineering :: Image Recognition",
        "Topic :: Text Processing",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    python_requires=">=3.8",
    install_requires=read_requirements(),
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-flask>=1.2.0",
            "black>=21.0",
            "flake8>=3.9",
            "mypy>=0.910",
        ],
        "deploy": [
            "gunicorn>=20.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "event-ocr=event_ocr.image_event_processor:main",
            "event-ocr-server=app:main",
        ],
    },
    include_package_data=True,
    project_urls={
        "Bug Reports": "https://github.com/ozayn/planner/issues",
        "Source": "https://github.com/ozayn/planner",
    },
    keywords="events, ocr, flyers, tesseract, google-vision, flask",
)
