"""Command line interface for macrofy."""
