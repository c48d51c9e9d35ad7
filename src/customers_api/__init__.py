"""Customers and addresses CRUD service."""

__version__ = "0.1.0"
