"""Setup configuration for the Integration Service package.

This setup.py is kept minimal since package metadata is defined in pyproject.toml.
"""
from setuptools import setup

# All configuration is in pyproject.toml
setup()
