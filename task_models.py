import enum

from sqlalchemy import Column, String, ForeignKey

from database import Base
from encryption import EncryptedString
from models import new_id


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    DONE = "done"


class TaskTag(str, enum.Enum):
    PERSONAL = "personal"
    OFFICIAL = "official"
    FAMILY = "family"


class TaskDB(Base):
    __tablename__ = "tasks"
    id = Column(String(32), primary_key=True, default=new_id)
    # Stored encrypted when DB_ENCRYPTION_KEY is set
    taskname = Column(EncryptedString, nullable=False)
    status = Column(String, nullable=False)
    tag = Column(String, nullable=False)
    owner_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
