"""REST API for Nexus Flow."""
