"""
Target model: one backend address of a resource.

Each target's IP becomes a /32 allowed-IP entry on its site's peer.
"""
from sqlalchemy import String, Integer, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, generate_ulid


class Target(Base, TimestampMixin):
    __tablename__ = "targets"
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    resource_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("resources.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    ip: Mapped[str] = mapped_column(String(45), nullable=False)
    method: Mapped[str | None] = mapped_column(String(10), nullable=True)  # http, https
    port: Mapped[int | None] = mapped_column(Integer, nullable=True)
    protocol: Mapped[str | None] = mapped_column(String(10), nullable=True)  # tcp, udp
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    
    def __repr__(self) -> str:
        return f"<Target(id={self.id}, ip={self.ip}, resource_id={self.resource_id})>"
