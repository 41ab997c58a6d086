"""Shared pydantic configuration for API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ApiModel(BaseModel):
    """Payload model that accepts both field names and their JSON aliases."""

    model_config = ConfigDict(populate_by_name=True)
