"""
Site model.

A site is one remote tunnel endpoint; its public key is its WireGuard peer identity.
"""
from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, generate_ulid


class Site(Base, TimestampMixin):
    __tablename__ = "sites"
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    org_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    exit_node_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("exit_nodes.exit_node_id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    subdomain: Mapped[str | None] = mapped_column(String(255), nullable=True)
    pub_key: Mapped[str | None] = mapped_column(String(64), nullable=True)
    subnet: Mapped[str | None] = mapped_column(String(43), nullable=True)
    
    def __repr__(self) -> str:
        return f"<Site(id={self.id}, name={self.name!r}, org_id={self.org_id}, exit_node_id={self.exit_node_id})>"
