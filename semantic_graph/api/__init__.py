"""FastAPI backend for the graph view."""
