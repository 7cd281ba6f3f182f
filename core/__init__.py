"""Core business logic for the study data server."""
