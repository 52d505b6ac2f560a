"""Logging configuration for the countrycache application."""
