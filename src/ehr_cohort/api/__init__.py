"""FastAPI surface over a single in-memory analysis session."""
