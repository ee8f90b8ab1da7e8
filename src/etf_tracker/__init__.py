"""Paper-trading dashboard for a fixed ETF-style equity basket."""

__version__ = "0.1.0"
