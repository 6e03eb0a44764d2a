"""Sedbot — rewrites chat messages with sed-style substitution commands."""

__version__ = "0.4.0"
