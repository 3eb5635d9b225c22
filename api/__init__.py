"""HTTP layer for the fair-chance workflow (FastAPI)."""
