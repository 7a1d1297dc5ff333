"""Crypto Trading Journal - trade log, P&L analytics and reports."""

__version__ = "0.1.0"
