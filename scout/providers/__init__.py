"""External collaborators consumed by Scout."""
