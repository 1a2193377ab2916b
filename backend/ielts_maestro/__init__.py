"""IELTS practice content generation and assessment API."""

__version__ = "0.1.0"
