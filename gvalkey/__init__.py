"""An in-memory key-value server speaking the Redis serialization protocol."""

__version__ = "0.1.0"