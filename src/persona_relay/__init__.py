"""Persona relay: bounded in-character chat relay for a 3D avatar front end."""

__version__ = "0.1.0"
