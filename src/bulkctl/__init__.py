"""bulkctl — batch a stream of commands into timestamped bulk logs."""

__version__ = "0.1.0"
