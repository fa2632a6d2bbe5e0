"""JSON HTTP service for storing, searching, updating and deleting users in PostgreSQL."""

__version__ = "0.1.0"