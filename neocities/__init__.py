"""Client library and command-line tool for the Neocities web hosting API."""

__version__ = "0.0.4"