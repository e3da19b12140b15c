"""
vidgrab - interactive video download front-end with tool bootstrap.
"""

__version__ = "0.3.0"
