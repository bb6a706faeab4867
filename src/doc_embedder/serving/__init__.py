"""
Serving — FastAPI application for the embedding pipeline.

Exposes document upload, embedding progress, and JSON export over HTTP.
"""
