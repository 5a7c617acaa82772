#!/usr/bin/env python3

from setuptools import setup
from sys import version_info
from ax25codec import __version__

requirements = [
        'pint',
]

packages = [
        'ax25codec',
        'ax25codec.aprs',
]

if version_info.major < 3:
    # Python 2 or earlier, not supported (how did they get here?)
    raise NotImplementedError('Python 3.6 minimum is required')
elif (version_info.major == 3) and (version_info.minor < 6):
    # Python 3.0-3.5
    raise NotImplementedError('Python 3.6 minimum is required')

setup(
        name='ax25codec',
        version=__version__,
        license='GPL-2.0-or-later',
        packages=packages,
        requires=requirements,
        install_requires=requirements,
        extras_require={
            'test': ['pytest'],
        },
        description='AX.25, HDLC and APRS packet codecs in pure Python',
        classifiers=[
            'Development Status :: 2 - Pre-Alpha',
            'Intended Audience :: Developers',
            'License :: OSI Approved :: GNU General Public License v2 or later (GPLv2+)',
            'Operating System :: OS Independent',
            'Programming Language :: Python :: 3 :: Only',
            'Topic :: Communications :: Ham Radio'
        ]
)
