"""
Pydantic schemas for targets.
"""
from datetime import datetime
from ipaddress import IPv4Address
from typing import Literal
from pydantic import BaseModel, Field, field_validator, model_validator


class TargetCreate(BaseModel):
    ip: IPv4Address = Field(..., description="Backend address; exposed to the exit node as <ip>/32")
    method: Literal["http", "https"] | None = None
    port: int | None = Field(None, ge=1, le=65535)
    protocol: Literal["tcp", "udp"] | None = None
    enabled: bool = True


class TargetUpdate(BaseModel):
    ip: IPv4Address | None = None
    method: Literal["http", "https"] | None = None
    port: int | None = Field(None, ge=1, le=65535)
    protocol: Literal["tcp", "udp"] | None = None
    enabled: bool | None = None
    
    @field_validator("ip", "enabled")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Field may not be null")
        return v
    
    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self


class TargetResponse(BaseModel):
    id: str
    resource_id: str
    ip: str
    method: str | None = None
    port: int | None = None
    protocol: str | None = None
    enabled: bool
    created_at: datetime
    updated_at: datetime
    
    model_config = {"from_attributes": True}
