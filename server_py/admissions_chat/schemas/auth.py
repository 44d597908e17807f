from pydantic import BaseModel
from typing import Optional

# Admin login, a missing password is rejected as invalid credentials
class LoginRequest(BaseModel):
    password: Optional[str] = None
