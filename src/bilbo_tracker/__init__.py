"""BILBO strength-progression tracker with one-rep-max estimation."""

__version__ = "0.1.0"
