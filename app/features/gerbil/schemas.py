"""
Pydantic schemas for exit node configuration.

Serialized with camelCase keys, the format the tunnel daemon consumes.
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Peer(BaseModel):
    """One site as seen by its exit node."""
    public_key: str | None = Field(None, description="WireGuard public key of the site")
    allowed_ips: list[str] = Field(default_factory=list, description="Target addresses as /32 ranges")
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExitNodeConfig(BaseModel):
    private_key: str
    listen_port: int
    ip_address: str
    peers: list[Peer] = Field(default_factory=list)
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
