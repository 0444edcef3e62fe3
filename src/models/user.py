"""
User-related Pydantic models
"""

from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class User(BaseModel):
    id: str = Field(..., description="Database-assigned identifier")
    name: str
    email: str


class UserWriteRequest(BaseModel):
    """Body accepted by create and update"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, description="Display name of the user")
    email: str = Field(..., min_length=1, description="Contact email, not format-checked")


class Envelope(BaseModel, Generic[T]):
    """Wrapper applied to every successful response body"""
    value: T


class UserEnvelope(Envelope[Optional[User]]):
    pass


class UserListEnvelope(Envelope[List[User]]):
    pass
