# models.py
from pydantic import BaseModel


class UserSignup(BaseModel):
    username: str
    email: str
    password: str


class UserSignin(BaseModel):
    email: str
    password: str


class CurrentUser(BaseModel):
    email: str
    id: str


class Token(BaseModel):
    token: str


class Message(BaseModel):
    message: str


class Favorite(BaseModel):
    email: str
    movie: str
