"""
Pydantic schemas for organization requests and responses.
"""
from datetime import datetime
from pydantic import BaseModel, Field, field_validator, model_validator


class OrganizationCreate(BaseModel):
    """Schema for creating a new organization."""
    name: str = Field(..., min_length=1, max_length=255)
    domain: str = Field(..., min_length=1, max_length=255)
    
    @field_validator("domain")
    @classmethod
    def domain_lowercase(cls, v: str) -> str:
        return v.strip().lower()


class OrganizationUpdate(BaseModel):
    """Schema for updating an organization; at least one field is required."""
    name: str | None = Field(None, min_length=1, max_length=255)
    domain: str | None = Field(None, min_length=1, max_length=255)
    
    @field_validator("name", "domain")
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


class OrganizationResponse(BaseModel):
    id: str
    name: str
    domain: str
    created_at: datetime
    updated_at: datetime
    
    model_config = {"from_attributes": True}
