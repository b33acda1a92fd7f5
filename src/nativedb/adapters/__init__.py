"""Adapters binding the catalog domain to files, HTTP services and SQL."""
