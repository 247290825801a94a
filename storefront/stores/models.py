from typing import Optional
from pydantic import BaseModel


class AddStoreUserRequest(BaseModel):
    creatorId: Optional[str] = None
    email: Optional[str] = None
    fullName: Optional[str] = None
