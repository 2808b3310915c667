"""Core services for the Content Platform."""
