from setuptools import setup

def get_version():
    v = "0.0.0"
    with open('phylostats/__init__.py') as ifile:
        for line in ifile:
            if line[:7]=='version':
                v = line.split('=')[-1].strip()[1:-1]
                break
    return v

with open("README.md", "r") as fh:
    long_description = fh.read()

setup(
        name = "phylostats",
        version = get_version(),
        description = ("Comparative analysis of traits on phylogenies and classical statistics for teaching"),
        long_description = long_description,
        long_description_content_type="text/markdown",
        license = "MIT",
        keywords = "phylogenetic comparative methods, trait evolution, independent contrasts, Mk model",
        packages=['phylostats'],
        install_requires = [
            'biopython>=1.66',
            'numpy>=1.17',
            'pandas>=0.25',
            'scipy>=1.4',
            'statsmodels>=0.12',
            'matplotlib>=2.0'
        ],
        extras_require = {
            'test':['pytest'],
        },
        classifiers=[
            "Development Status :: 3 - Alpha",
            "Topic :: Scientific/Engineering :: Bio-Informatics",
            "License :: OSI Approved :: MIT License",
            "Programming Language :: Python :: 3"
            ],
        entry_points = {
            'console_scripts': ['phylostats=phylostats.__main__:main']
        }
    )
