from pydantic import BaseModel, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

class RegisterRequest(BaseModel):
    username: str = Field(min_length=3)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)

class LoginRequest(BaseModel):
    email: str
    password: str

class UserRead(BaseModel):
    id: int
    username: str
    email: str
    is_premium: bool = False

class AuthResponse(BaseModel):
    token: str
    user: UserRead
