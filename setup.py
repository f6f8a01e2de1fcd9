"""
Setup.py script for cowint
"""
from setuptools import setup, find_packages
# To use a consistent encoding
from codecs import open
import os

here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, 'README-cowint.rst'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='cowint',
    version='0.1.0',
    description='Big integers with copy-on-write limb storage',
    long_description=long_description,

    license='MIT',

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Topic :: Scientific/Engineering :: Mathematics',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
    ],
    keywords='bigint arbitrary-precision copy-on-write',

    packages=find_packages(exclude=('*.test',)),
    python_requires='>=3.6',

    install_requires=['py'],
    extras_require={
        'test': ['pytest', 'hypothesis'],
    },
    entry_points={
        "console_scripts": [
            "cowint = cowint.tool.calc:main",
        ],
    },
)
