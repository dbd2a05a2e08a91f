"""Tidal-cycle feature derivation for ocean acidification sensor records."""

__version__ = '0.1.0'
