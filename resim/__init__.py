"""
Real estate investment simulator.
"""

__version__ = "0.1.0"
