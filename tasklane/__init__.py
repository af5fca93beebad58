"""Tasklane: multi-tenant task and project management API."""

__version__ = "0.4.0"
