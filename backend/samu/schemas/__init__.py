"""API Schemas — Pydantic request/response models for every route."""
