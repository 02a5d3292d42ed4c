"""Command line utilities for the garden engine datasets and saved state."""
