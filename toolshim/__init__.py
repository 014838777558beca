"""
toolshim: isolated tool installs with shims, and project script dispatch.
"""

__version__ = "0.1.0"
