"""Command line interface for cashflow."""
