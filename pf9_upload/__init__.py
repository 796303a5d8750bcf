"""Upload a single file to the storage prefix a customer token is authorized for."""

__version__ = "0.1.0"
