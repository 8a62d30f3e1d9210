# Copyright European Space Agency, 2013

from setuptools import setup, find_packages
import re

# version handling from https://stackoverflow.com/a/7071358
VERSIONFILE="planetmap/_version.py"
verstrline = open(VERSIONFILE, "rt").read()
VSRE = r"^__version__ = ['\"]([^'\"]*)['\"]"
mo = re.search(VSRE, verstrline, re.M)
if mo:
    verstr = mo.group(1)
else:
    raise RuntimeError("Unable to find version string in %s." % (VERSIONFILE,))

setup(
    name = 'planetmap',
    description = 'PLANETary MAPping toolkit',
    long_description = open('README.rst').read(),
    version = verstr,
    license = 'ESCL - Type 1',
    classifiers=[
      'Development Status :: 4 - Beta',
      'Intended Audience :: Science/Research',
      'Natural Language :: English',
      'Programming Language :: Python :: 3',
      'Operating System :: OS Independent',
      'Topic :: Scientific/Engineering :: Astronomy',
      'Topic :: Software Development :: Libraries',
    ],
    packages = find_packages(),
    python_requires = '>=3.8',
    install_requires=['numpy>=1.17',
                      'scipy>=1.0', # bilinear interpolation of photos
                      'matplotlib', # required by planetmap.draw
                      'numexpr',
                      'astropy>=3.0',
                      ],
    extras_require = {
        'test': ['pytest'],
    },
)
