#!/usr/bin/python

import codecs
import os
import re

from setuptools import find_packages, setup


here = os.path.abspath(os.path.dirname(__file__))


def read(*parts):
    with codecs.open(os.path.join(here, *parts), 'r') as f:
        return f.read()


def find_meta(meta, *file_paths):
    meta_file = read(*file_paths)
    meta_match = re.search(r"^__{}__ = ['\"]([^'\"]*)['\"]".format(meta),
                           meta_file, re.M)
    if meta_match:
        return meta_match.group(1)
    raise RuntimeError("Unable to find __{}__ string.".format(meta))


if __name__ == '__main__':
    init = ("dsadmin", "__init__.py")
    setup(
        name=find_meta("title", *init),
        version=find_meta("version", *init),
        description=find_meta("description", *init),
        license=find_meta("license", *init),
        author=find_meta("author", *init),
        packages=find_packages(include=["dsadmin", "dsadmin.*"]),
        python_requires=">=3.6",
        install_requires=[
            "ldaptor",
            "Twisted",
            "zope.interface",
        ],
        classifiers=[
            "Development Status :: 4 - Beta",
            "Intended Audience :: System Administrators",
            "License :: OSI Approved :: MIT License",
            "Programming Language :: Python :: 3",
            "Topic :: System :: Systems Administration :: "
            "Authentication/Directory :: LDAP",
        ],
    )
