"""Lawdio backend: legal tutoring Q&A, speech and session-notes export."""

__version__ = "0.3.0"
