"""
Helsinki day-ahead spot price estimates from FMI weather and Finnish market prices.
"""

__version__ = "0.3.0"
