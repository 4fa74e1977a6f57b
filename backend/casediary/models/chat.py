from pydantic import BaseModel
from typing import Literal


class ChatMessage(BaseModel):
    role: Literal["user", "model"]  # "model" is the counsel's reply
    content: str
