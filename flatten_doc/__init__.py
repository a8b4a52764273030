"""
flatten-doc package initializer.
Defines the package version; the CLI lives in :mod:`flatten_doc.cli`.
"""
__version__ = "0.1.0"
