"""Kashibotto - Japanese lyrics with readings and dictionary glosses."""

__version__ = "1.0.0"
