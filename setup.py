from io import open

from setuptools import find_packages, setup

# following src dir layout according to
# https://blog.ionelmc.ro/2014/05/25/python-packaging/#the-structure
version = "0.1.0"
setup(
    name="tagbam",
    version=version,
    description="Re-tag BAM files with cell barcodes and UMIs parsed from read names",
    license="BSD 3-Clause",
    long_description=open("README.rst").read(),
    install_requires=[
        'click',
        'click-log',
        'pysam',
        'tqdm',
    ],
    extras_require={"test": ["coverage", "pytest"]},
    tests_require=["coverage", "pytest"],
    python_requires=">=3.7",
    packages=find_packages("src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: BSD License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
    entry_points={"console_scripts": ["tagbam=tagbam.__main__:main_entry"]},
    include_package_data=True,
)
