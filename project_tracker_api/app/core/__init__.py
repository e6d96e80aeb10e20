"""Settings, logging, storage access and the error classes."""
