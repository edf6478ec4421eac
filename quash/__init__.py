"""quash - a small interactive shell with timed foreground jobs."""

__version__ = "1.0.0"
