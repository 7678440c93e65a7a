"""Core services: paths, configuration, history and restore."""
