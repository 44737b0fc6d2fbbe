# teamup/models/connection.py
from sqlalchemy import Column, Integer, ForeignKey, TIMESTAMP, UniqueConstraint, func
from sqlalchemy.orm import relationship
from teamup.database import Base


class Connection(Base):
    """
    Directed connection request (user -> target).

    There is no accepted flag: two users are connected when rows exist in
    both directions.
    """
    __tablename__ = "connections"
    __table_args__ = (
        UniqueConstraint("user_id", "target_user_id", name="uq_connection_pair"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    target_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(TIMESTAMP, server_default=func.now(), nullable=False)

    requester = relationship("User", foreign_keys=[user_id])
    target = relationship("User", foreign_keys=[target_user_id])
