"""Command-line entry points for gboxrun."""
