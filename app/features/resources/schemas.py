"""
Pydantic schemas for resources.
"""
from datetime import datetime
from pydantic import BaseModel, Field, field_validator, model_validator


class ResourceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    subdomain: str | None = Field(None, min_length=1, max_length=255)


class ResourceUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    subdomain: str | None = Field(None, min_length=1, max_length=255)
    
    @field_validator("name")
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


class ResourceResponse(BaseModel):
    id: str
    site_id: str
    org_id: str
    name: str
    subdomain: str | None = None
    created_at: datetime
    updated_at: datetime
    
    model_config = {"from_attributes": True}
