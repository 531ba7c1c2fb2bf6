"""Airtable relay — HTTP façade over the Airtable metadata API."""

__version__ = "1.0.0"
