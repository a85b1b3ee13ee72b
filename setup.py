import os
import re

from setuptools import setup


def get_version():
    module_init = 'pixeltree/version.py'

    if not os.path.isfile(module_init):
        module_init = '../' + module_init
        if not os.path.isfile(module_init):
            raise ValueError('Unable to determine version!')

    with open(module_init) as version_file:
        return re.search(r'__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
                         version_file.read()).group(1)


setup(name='pixeltree',
      version=get_version(),
      description='Controller core for networked addressable LED strips',
      url='https://github.com/pixeltree/pixeltree',
      author='PixelTree Developers',
      license='LGPL',
      platforms='any',
      packages=['pixeltree', 'pixeltree.client', 'pixeltree.client.commands'],
      entry_points={
          'console_scripts': [
              'pixeltree = pixeltree.client.main:cli_entry'
          ]
      },
      install_requires=['aiohttp', 'colorlog', 'frozendict', 'grapefruit',
                        'ruamel.yaml', 'traitlets', 'wrapt'],
      extras_require={
          'test': ['pytest'],
      },
      python_requires='>=3.10',
      keywords='led ws2812 lighting controller',
      include_package_data=True,
      zip_safe=False,
      classifiers=[
          'Development Status :: 3 - Alpha',
          'Environment :: Console',
          'Intended Audience :: Developers',
          'Intended Audience :: End Users/Desktop',
          'License :: OSI Approved :: GNU Lesser General Public License v3 (LGPLv3)',
          'Operating System :: OS Independent',
          'Programming Language :: Python :: 3 :: Only',
          'Topic :: Home Automation'
      ])
