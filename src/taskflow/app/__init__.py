"""FastAPI application package for TaskFlow."""
