#!/usr/bin/env python
# usage: pip install .
import os

from setuptools import setup

# fmt: off
here = os.path.dirname(os.path.abspath(__file__))
version = os.path.join(here, 'gitlanes', '_version.py')
scope = {}
# flake8: noqa
with open(version) as version_file:
    exec(version_file.read(), scope)  # pylint: disable=exec-used
version = scope['VERSION']
# fmt: on


def main():
    """Runs setuptools.setup()"""
    packages = [str('gitlanes'), str('gitlanes.models'), str('gitlanes.widgets')]

    setup(
        name='git-lanes',
        version=version,
        description='Commit graph lane layout for Git history viewers',
        long_description='Deterministic lane, colour and line layout for commit graphs',
        license='GPLv2',
        packages=packages,
        platforms='any',
        python_requires='>=3.7',
        install_requires=[
            'qtpy',
            'PyQt5',
        ],
        extras_require={
            'testing': [
                'pytest',
            ],
        },
    )


if __name__ == '__main__':
    main()
