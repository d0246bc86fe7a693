# Role: One conversation turn. Turns are appended to SessionState.turns and never edited afterwards
# (frozen model); the context analyzer reads the latest assistant turn to bias extraction.

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Speaker = Literal["user", "assistant"]


class ConversationTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    speaker: Speaker
    text: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
