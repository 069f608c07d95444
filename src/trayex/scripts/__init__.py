"""Command-line tools for operators, drivers and gate devices."""
