from pydantic import BaseModel
from typing import Optional


class TicketCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None


class TicketUpdate(BaseModel):
    status: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    assigned_to: Optional[str] = None


class TicketReplyCreate(BaseModel):
    message: Optional[str] = None


class TicketCreated(BaseModel):
    message: str = "Ticket created successfully"
    ticket_id: str
