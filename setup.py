# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
from setuptools import setup, find_packages
import sys


if sys.version_info.major != 3:
    print('This Python is only compatible with Python 3, but you are running '
          'Python {}. The installation will likely fail.'.format(sys.version_info.major))


setup(name='dxldriver',
      packages=[package for package in find_packages()
                if package.startswith('dxldriver')],
      install_requires=[
          'numpy',
          'pyserial',
      ],
      extras_require={
          'examples': ['matplotlib'],
          'test': ['pytest'],
      },
      description='Driver for Dynamixel Protocol 1.0 serial bus servos',
      author='The SenseAct Team',
      url='https://github.com/kindredresearch/SenseAct',
      author_email='',
      version='0.1.0')
