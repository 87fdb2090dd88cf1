"""
workbridge: translate-and-normalize boundary for the workbridge marketplace.
"""

__version__ = "0.1.0"
