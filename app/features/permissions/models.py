"""
Role and grant models for organization-scoped access control.

- Roles are defined per organization
- RoleAction grants an action to every member holding a role
- UserAction grants an action to one user, independent of role
"""
from sqlalchemy import String, ForeignKey, Text, Boolean, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, generate_ulid


class Role(Base, TimestampMixin):
    """
    Role model grouping action grants inside one organization.
    
    Examples: Admin, Member, Auditor
    """
    __tablename__ = "roles"
    __table_args__ = (UniqueConstraint("org_id", "name", name="uq_roles_org_name"),)
    
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    org_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    
    # Admin roles are created with the organization and hold every action
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    
    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name!r}, org_id={self.org_id})>"


class RoleAction(Base):
    """Grant of one action to one role, within one organization."""
    __tablename__ = "role_actions"
    
    role_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True
    )
    action_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    org_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        primary_key=True
    )
    
    def __repr__(self) -> str:
        return f"<RoleAction(role_id={self.role_id}, action={self.action_id}, org_id={self.org_id})>"


class UserAction(Base):
    """Direct grant of one action to one user, within one organization."""
    __tablename__ = "user_actions"
    
    user_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True
    )
    action_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    org_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        primary_key=True
    )
    
    def __repr__(self) -> str:
        return f"<UserAction(user_id={self.user_id}, action={self.action_id}, org_id={self.org_id})>"
