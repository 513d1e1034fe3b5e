from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
import bleach
import html

# Required-ness and enum membership are checked by the stores so that every
# rejection carries the same ValidationError shape.


# --- Auth Models ---
class SignupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    password: Optional[str] = None
    ip_address: Optional[str] = Field(default=None, alias="ipAddress")

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class TokenResponse(BaseModel):
    token: str


# --- Task Models ---
class TaskFields(BaseModel):
    taskname: Optional[str] = None
    status: Optional[str] = None  # 'pending' | 'done'
    tag: Optional[str] = None  # 'personal' | 'official' | 'family'

    @field_validator('taskname')
    @classmethod
    def sanitize_input(cls, v: Optional[str]) -> Optional[str]:
        if v:
            # Strip all HTML tags and attributes, then undo the entity escaping
            # bleach applies to the remaining text (e.g. "&" -> "&amp;")
            return html.unescape(bleach.clean(v, tags=[], attributes={}, strip=True))
        return v

class TaskCreate(TaskFields):
    pass

class TaskUpdate(TaskFields):
    pass

class Task(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    taskname: str
    status: str
    tag: str
    owner_id: str
