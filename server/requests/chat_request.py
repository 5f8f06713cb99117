"""ChatRequest model."""

from pydantic import BaseModel


class ChatRequest(BaseModel):
    """A user prompt relayed to the completion endpoint."""

    text: str
    messageID: str | None = None
    selectedChatModel: str | None = None
