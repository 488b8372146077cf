"""podinbox command-line interface."""
