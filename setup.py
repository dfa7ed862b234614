from setuptools import setup, find_packages
import os
import re

# Read the version from __init__.py
with open(os.path.join('simvar', '__init__.py'), 'r') as f:
    version_file = f.read()
    version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", version_file, re.M)
    if version_match:
        version = version_match.group(1)
    else:
        version = "0.1.0"  # Default if not found

# Read the long description from README.md
long_description = ""
if os.path.exists('README.md'):
    with open('README.md', 'r') as f:
        long_description = f.read()

setup(
    name="simvar",
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        "biopython>=1.79",
        "cyvcf2>=0.30.0",
        "numpy>=1.20.0",
    ],
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=2.12.0',
        ],
        'test': [
            'pytest>=7.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'simvar=simvar.cli:main',
        ],
    },
    description="Synthetic single-sample VCFs with spiked-in mutations for variant calling benchmarks",
    long_description=long_description,
    long_description_content_type="text/markdown",
    keywords="bioinformatics, genomics, VCF, simulation, spike-in, benchmarking",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
    ],
    python_requires=">=3.8",
    scripts=['simvar.py'],
)
