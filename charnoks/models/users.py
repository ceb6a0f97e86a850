# charnoks/models/users.py

from sqlalchemy import CheckConstraint, Column, Integer, String, DateTime
from sqlalchemy.sql import func

from charnoks.database import Base

ROLE_WORKER = "worker"
ROLE_OWNER = "owner"
ROLES = (ROLE_WORKER, ROLE_OWNER)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    display_name = Column(String, nullable=False)

    # New accounts start as workers; owners promote them
    role = Column(String, nullable=False, default=ROLE_WORKER)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("role IN ('worker', 'owner')", name="ck_users_role_valid"),
    )
