"""Weekly priority tracker: weekly commitments tagged to strategic initiatives."""

__version__ = "0.1.0"
