"""Agenda - academic calendar and activity organizer."""

__version__ = "0.1.0"
