from pydantic import BaseModel, EmailStr, ConfigDict
from typing import Optional
from datetime import datetime


class UserRegister(BaseModel):
    email: EmailStr
    password: str
    first_name: str
    last_name: str
    city: str
    address: str
    zip: str
    # Accepted for compatibility with the old frontend, never applied
    role: Optional[str] = None


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserOut(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    city: str
    address: str
    zip: str
    role: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    zip: Optional[str] = None


class RoleUpdate(BaseModel):
    role: str


class Token(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserOut
