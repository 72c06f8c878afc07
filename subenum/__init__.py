"""SUBENUM — HTTP façade over the subfinder subdomain enumeration engine."""

__version__ = "2.0.0"
