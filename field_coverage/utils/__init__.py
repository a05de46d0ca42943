"""
Shared utilities: logging, configuration, exceptions and error handling.
"""
