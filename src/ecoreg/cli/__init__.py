"""Command-line interface for ecoreg."""
