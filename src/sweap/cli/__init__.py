"""Command line interface for the Sweap client."""
