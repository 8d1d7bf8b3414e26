"""
Lead Concierge admin tooling.

Command-line access to captured leads: list, export, clear.
"""
