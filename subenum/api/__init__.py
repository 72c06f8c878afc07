"""FastAPI boundary for SUBENUM."""
