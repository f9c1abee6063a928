"""Browsable directory view and download gateway over an S3 bucket."""

__version__ = "1.0.0"
