"""Command line interface for ral."""
