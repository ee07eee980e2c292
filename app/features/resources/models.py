"""
Resource model: a service exposed through a site.
"""
from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, generate_ulid


class Resource(Base, TimestampMixin):
    __tablename__ = "resources"
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    site_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    org_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    subdomain: Mapped[str | None] = mapped_column(String(255), nullable=True)
    
    def __repr__(self) -> str:
        return f"<Resource(id={self.id}, name={self.name!r}, site_id={self.site_id})>"
