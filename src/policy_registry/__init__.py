"""Policy Registry - CRUD API for insurance policy records."""

__version__ = "1.0.0"
