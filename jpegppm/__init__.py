"""Baseline JPEG decoder producing binary PGM and PPM images."""

__version__ = "0.1.0"