"""Integration package root."""
