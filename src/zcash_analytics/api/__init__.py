"""HTTP API — FastAPI app factory, middleware and routes."""
