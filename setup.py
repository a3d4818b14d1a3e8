#!/usr/bin/env python

from setuptools import setup

import re
import os.path

# Read the version without importing pssig, which needs bplib to load
with open(os.path.join("pssig", "__init__.py")) as init_file:
    VERSION = re.findall("VERSION.*=.*['\"](.*)['\"]", init_file.read())[0]

setup(name='pssig',
      version=VERSION,
      description='Pointcheval-Sanders short randomizable signatures, with batch signing and sequential aggregation',
      author='George Danezis',
      author_email='g.danezis@ucl.ac.uk',
      packages=['pssig'],
      license="2-clause BSD",
      long_description="""A library implementing Pointcheval-Sanders multi-message signatures over bilinear pairings, built on bplib and petlib""",

      python_requires=">=3.6",
      install_requires=[
            "petlib >= 0.0.45",
            "bplib >= 0.0.6",
            "msgpack >= 1.0.0",
            "pytest >= 2.5.0",
      ],
      extras_require={
            "test": [
                  "pytest >= 2.5.0",
                  "pytest-cov >= 1.8.1",
                  "paver >= 1.2.3",
            ],
      },
      zip_safe=False,
)
