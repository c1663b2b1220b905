"""Command line interface for the model store."""
