"""Command-line interface for json2text."""
