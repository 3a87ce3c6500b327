"""HTTP API layer: FastAPI app, job system and routes."""
