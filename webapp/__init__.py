"""Web App: FastAPI boundary for the insights pipelines."""
