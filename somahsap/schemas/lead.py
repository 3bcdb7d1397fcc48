# somahsap/schemas/lead.py
from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

LeadType = Literal["quote", "message", "quick"]
LeadStatus = Literal["new", "contacted", "closed"]


class LeadEntry(BaseModel):
    id: str
    type: LeadType
    email: str
    phone: str = ""
    createdAt: str  # ISO-8601 UTC
    payload: Dict[str, Any] = Field(default_factory=dict)
    notes: Optional[str] = None
    status: Optional[LeadStatus] = None
