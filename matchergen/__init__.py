"""
matchergen — generate PyHamcrest matchers for bean-like classes.
"""

__version__ = "0.1.0"
