"""Shared Pydantic base model for API routers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class _BaseModel(BaseModel):
    """Base model tolerant to extra fields that accepts field names or aliases."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


__all__ = ["_BaseModel"]
