"""Data Alchemist: validate, search and curate client / worker / task sheets."""

__version__ = "0.1.0"
