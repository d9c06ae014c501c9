"""Command line interface for the volume backup job."""
