"""Contact registry: people and organizations sharing email, phone and address values."""

__version__ = "0.1.0"
