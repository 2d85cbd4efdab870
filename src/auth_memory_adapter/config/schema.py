"""Configuration schemas for building adapters.

These Pydantic models can be loaded from JSON text, e.g.
``AdapterConfigSchema.model_validate_json(path.read_text())``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class StoreConfigSchema(BaseModel):
    """Backend used for every entity store.

    Attributes:
        type: Backend name ("memory", "json", or a registered custom type)
        path: Data directory for the "json" backend.  Falls back to the
              AUTH_MEMORY_DIR environment variable when empty.
    """

    type: str = "memory"
    path: str = ""


class AdapterConfigSchema(BaseModel):
    """Complete adapter configuration.

    Attributes:
        store: Store backend configuration
        id_length: Length of generated user ids
    """

    store: StoreConfigSchema = Field(default_factory=StoreConfigSchema)
    id_length: int = Field(default=32, gt=0)
