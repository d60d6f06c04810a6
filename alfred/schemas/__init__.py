"""
schemas/ — Pydantic request/response models for the Alfred API

Provides input validation, OpenAPI docs, and the structured
error envelope shared by every endpoint.
"""
