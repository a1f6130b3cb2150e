"""hextext command-line interface."""
