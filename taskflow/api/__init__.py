"""In-memory stub of the TaskFlow HTTP service."""
