"""
Exit node model.

An exit node terminates the WireGuard tunnels of every site attached to it.
"""
from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin


class ExitNode(Base, TimestampMixin):
    __tablename__ = "exit_nodes"
    
    exit_node_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    
    # Tunnel address of the exit node itself, in CIDR notation (e.g. "10.0.0.1/24")
    address: Mapped[str] = mapped_column(String(43), nullable=False)
    private_key: Mapped[str] = mapped_column(String(64), nullable=False)
    listen_port: Mapped[int] = mapped_column(Integer, nullable=False)
    
    # Public endpoint sites dial into (host:port)
    endpoint: Mapped[str | None] = mapped_column(String(255), nullable=True)
    
    def __repr__(self) -> str:
        return f"<ExitNode(exit_node_id={self.exit_node_id}, name={self.name!r}, address={self.address})>"
