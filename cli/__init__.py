"""Command line client for the sensor analytics service."""
