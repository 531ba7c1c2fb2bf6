"""Command-line interface for the Airtable relay."""
