"""FastAPI dependencies that hand each request its store and services."""
