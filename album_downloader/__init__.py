"""Batch downloader for remote photo albums."""

__version__ = "0.1.0"
