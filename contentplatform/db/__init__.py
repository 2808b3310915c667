"""Database layer for the Content Platform."""
