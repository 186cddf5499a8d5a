"""Register observations produced by the device driver."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RegisterEvent(BaseModel):
    """A single register observation seen on the bus.

    ``raw_value`` is the byte as transmitted; ``value`` is the decoded
    quantity (fan speed, temperature, humidity, or the raw integer for
    registers without a dedicated decoding). ``source`` and ``destination``
    are bus addresses used for addressing checks.

    The register address is passed as ``register`` and read back as
    ``register_id``; ``register`` is already the ABC registration method
    on pydantic models.
    """

    model_config = ConfigDict(frozen=True)

    register_id: int = Field(..., alias="register", ge=0, le=0xFF)
    raw_value: int = Field(..., ge=0, le=0xFF)
    value: Any = None
    source: int = Field(default=0, ge=0, le=0xFF)
    destination: int = Field(default=0, ge=0, le=0xFF)
