import uuid

from sqlalchemy import Column, String

from database import Base


def new_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    __tablename__ = "users"
    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    # bcrypt hash, never the plaintext password
    hashed_password = Column(String, nullable=False)
    # Informational only, not used for access control
    ip_address = Column(String)
