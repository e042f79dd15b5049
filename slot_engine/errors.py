"""
REELFORGE — Engine Errors

ConfigurationError is fatal and raised while the machine is being built.
OutOfRangeError flags a caller passing a reel or stop index that does not exist.
"""


class ConfigurationError(Exception):
    """Invalid reel, weight, paytable or geometry configuration."""


class OutOfRangeError(IndexError):
    """A reel id or physical position outside its valid bounds."""
