"""
Pydantic schemas for sites.
"""
from datetime import datetime
from pydantic import BaseModel, Field, field_validator, model_validator


class SiteCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    subdomain: str | None = Field(None, min_length=1, max_length=255)
    pub_key: str | None = Field(None, max_length=64, description="WireGuard public key of the site")
    subnet: str | None = Field(None, max_length=43)
    exit_node_id: int | None = Field(None, description="Exit node terminating this site's tunnel")


class SiteUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    subdomain: str | None = Field(None, min_length=1, max_length=255)
    pub_key: str | None = Field(None, max_length=64)
    subnet: str | None = Field(None, max_length=43)
    exit_node_id: int | None = None
    
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


class SiteResponse(BaseModel):
    id: str
    org_id: str
    exit_node_id: int | None = None
    name: str
    subdomain: str | None = None
    pub_key: str | None = None
    subnet: str | None = None
    created_at: datetime
    updated_at: datetime
    
    model_config = {"from_attributes": True}
