"""Command-line front end for select2text."""
