"""Structured value model for the ctrlplane configuration plugin."""

__version__ = "0.1.0"
