"""Helpers shared by the backend and the frontends."""
