"""
Organization and membership models.

Organizations are the tenant boundary: every site, resource, grant and role
belongs to exactly one organization.
"""
from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, generate_ulid


class Organization(Base, TimestampMixin):
    """Organization model (tenant)."""
    __tablename__ = "organizations"
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    domain: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    
    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name!r}, domain={self.domain!r})>"


class UserOrg(Base, TimestampMixin):
    """
    Membership of a user in an organization.
    
    The (user_id, org_id) primary key guarantees at most one role per user
    per organization.
    """
    __tablename__ = "user_orgs"
    
    user_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True
    )
    org_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        primary_key=True
    )
    role_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    def __repr__(self) -> str:
        return f"<UserOrg(user_id={self.user_id}, org_id={self.org_id}, role_id={self.role_id})>"
