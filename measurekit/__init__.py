"""
measurekit - Measurement toolkit.

Unit conversion across built-in and user defined units, plus the saved
state of a measurement workbench (favourites, history, counters,
stopwatch logs and settings).
"""

__version__ = "1.0.0"
