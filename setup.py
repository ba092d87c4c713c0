# -*- encoding: utf-8 -*-
from setuptools import setup, find_packages

with open('README.rst', 'r', encoding='utf-8') as fh:
    long_description = fh.read()


def get_version(package_path):
    import os
    from importlib.util import module_from_spec, spec_from_file_location
    spec = spec_from_file_location('version', os.path.join('src', package_path, '_version.py'))
    module = module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.__version__


setup(
    name='aeskw',
    version=get_version('aeskw'),
    description='AES key wrap (RFC 3394) and AES key wrap with padding (RFC 5649)',
    long_description=long_description,
    long_description_content_type='text/x-rst',
    classifiers="""Development Status :: 4 - Beta
Environment :: Console
Intended Audience :: Developers
License :: OSI Approved :: GNU Lesser General Public License v3 (LGPLv3)
Operating System :: POSIX
Programming Language :: Python :: 3
Topic :: Security :: Cryptography
""" [:-1].split('\n'),
    keywords='aes keywrap rfc3394 rfc5649',
    license='LGPL-3',
    packages=find_packages('src', exclude=['*.tests', '*.tests.*']),
    package_dir={
        '': 'src',
    },
    package_data={
        'aeskw': ['schemas/*/*.yaml'],
    },
    zip_safe=False,  # ONLY because the schemas are read from the file system. The rest is zip-safe.
    install_requires=[
        'pycryptodome>=3.6.1,<4',
        'structlog>=19.1.0',
        'colorama>=0.4.1,<1',
        'ruamel.yaml>=0.15.0',
        'cerberus>=1.3,<2',
        'semantic_version>=2.8.0,<3',
        'argcomplete>=1.9.4',
    ],
    extras_require={
        'dev': ['pytest', 'parameterized'],
    },
    python_requires='>=3.6',
    entry_points="""
        [console_scripts]
            aeskw = aeskw.scripts.aeskw:main
    """,
)
