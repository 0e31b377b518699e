"""Pydantic request/response schemas for the Tutorly API."""
