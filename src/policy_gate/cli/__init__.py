"""Command-line interface for policy-gate."""
