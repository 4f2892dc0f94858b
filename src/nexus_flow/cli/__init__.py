"""Command-line interface for Nexus Flow."""
