"""TCP echo servers in four concurrency models, with an interactive client."""

__version__ = "0.1.0"