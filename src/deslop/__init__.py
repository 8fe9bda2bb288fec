"""
deslop - Find AI slop in source repositories.

Scans source trees for the leftovers of machine-written code: debugging
statements, placeholder functions, documentation that dwarfs the code,
quality claims with no evidence behind them and signs of over-engineering.
"""

__version__ = "0.1.0"
__author__ = "deslop contributors"
