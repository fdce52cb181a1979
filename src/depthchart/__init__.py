"""Roster ratings inference, progression and depth chart resolution."""

__version__ = "0.1.0"
