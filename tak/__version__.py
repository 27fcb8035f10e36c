"""Version information for tak."""

__version__ = "0.3.0"
