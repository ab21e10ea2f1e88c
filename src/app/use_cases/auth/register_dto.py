"""
Register Use Case DTOs (Data Transfer Objects)

Command/Response pattern for clean architecture separation:
- RegisterCommand: Input to use case (validated business intent)
- RegisterResponse: Output from use case (structured result)
"""

from datetime import date

from pydantic import BaseModel

from src.domain.entities import Gender
from .dtos import UserProfile


class RegisterCommand(BaseModel):
    """
    Register command - represents validated registration intent

    Created by API layer after request validation passes.
    Contains only business-relevant data (no HTTP concerns).
    """

    first_name: str
    last_name: str
    user_name: str
    email: str
    password: str
    gender: Gender
    dob: date


class RegisterResponse(BaseModel):
    """
    Register response - structured output from use case

    No session is opened on registration; the client logs in for one.
    """

    success: bool = True
    message: str = "User registered successfully"
    user: UserProfile
    access_token: str
    refresh_token: str
