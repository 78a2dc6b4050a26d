"""SUCCESS back office: department-scoped admin access control."""

__version__ = "0.1.0"
