"""Nexus Flow - personal productivity suite: tasks, inventory, focus time and finances."""

__version__ = "0.1.0"
