"""Version information for Jira Ticket Forge."""
__version__ = "1.0.0"
