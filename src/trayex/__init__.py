"""Trayex shuttle backend: accounts, reservations and rotating boarding passes."""

__version__ = "0.1.0"
