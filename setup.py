# Copyright 2022 Grabtaxi Holdings Pte Ltd (GRAB), All rights reserved.

# Use of this source code is governed by an MIT-style license that can be found in the LICENSE file

from setuptools import setup

setup(
    name='obdd-compare',
    version='0.0.1',
    install_requires=[
        'gmpy2 >= 2.1.0',
        'numpy >= 1.15.4',
        'toposort >= 1.6',
    ],
    extras_require={
        'test': ['pytest >= 7.0'],
    },
    package_dir={'': 'src'},
    py_modules=[
        'obdd_comparator',
        'obdd_compare_func',
        'obdd_exceptions',
        'obdd_graph',
        'obdd_inference',
        'obdd_logical',
        'obdd_nodes',
        'obdd_parser',
        'obdd_traversal',
        'obdd_utils',
    ],
    entry_points={
        'console_scripts': ['obdd-compare=obdd_compare_func:main'],
    },
)
