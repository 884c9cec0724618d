"""Tubecast

Turns a video channel's catalog into a podcast feed, merging newly published
videos into an existing feed file while keeping episode identity and numbering
stable across runs.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
