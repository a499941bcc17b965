from pydantic import BaseModel


class ManagerPinIn(BaseModel):
    pin: str


class ManagerTokenOut(BaseModel):
    token: str
    expires_in_seconds: int
    message: str


class ManagerSessionOut(BaseModel):
    authenticated: bool
    remaining_seconds: int
    message: str
