"""podinbox core: configuration, models, errors and constants."""
