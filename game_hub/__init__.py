"""Game Hub: browse a game catalog API from the terminal."""

__version__ = "0.1.0"
