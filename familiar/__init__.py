"""Familiar: a local, tool-using conversational agent."""

__version__ = "0.1.0"
