"""
Schemas for the practice-management records: clients, cases, appointments,
documents and invoices.
"""

from datetime import date as Date, datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

ClientType = Literal["individual", "company"]
CaseStatus = Literal["open", "closed", "in_progress"]
AppointmentType = Literal["court", "meeting", "deadline"]
DocumentStatus = Literal["draft", "final"]
InvoiceStatus = Literal["paid", "unpaid", "overdue"]


# Clients
class ClientCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = Field(None, max_length=255)
    type: ClientType = "individual"


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = Field(None, max_length=255)
    type: Optional[ClientType] = None


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    type: str
    lawyer_id: str
    created_at: Optional[str] = None


class ClientSummaryResponse(ClientResponse):
    case_count: int = 0
    appointment_count: int = 0
    document_count: int = 0
    invoice_count: int = 0
    outstanding_balance: float = 0.0


class ClientRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


# Cases
class CaseCreate(BaseModel):
    number: Optional[str] = Field(None, min_length=1, max_length=50, description="Generated when omitted")
    title: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=100)
    court: str = Field(..., min_length=1, max_length=255)
    status: CaseStatus = "open"
    description: Optional[str] = Field(None, max_length=10000)
    client_id: Optional[str] = None


class CaseUpdate(BaseModel):
    number: Optional[str] = Field(None, min_length=1, max_length=50)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    court: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[CaseStatus] = None
    description: Optional[str] = Field(None, max_length=10000)
    client_id: Optional[str] = None


class CaseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    number: str
    title: str
    type: str
    court: str
    status: str
    description: Optional[str] = None
    client_id: Optional[str] = None
    lawyer_id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    # Same value as id, the name the legacy web client reads
    caseId: Optional[str] = None


class CaseChatMessageCreate(BaseModel):
    message: str = Field(..., min_length=1, max_length=10000)
    sender: Literal["user", "ai"] = "user"


class CaseChatMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    case_id: str
    message: str
    sender: str
    created_at: Optional[str] = None


# Appointments
class AppointmentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    type: AppointmentType
    date: datetime
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=5000)
    case_id: Optional[str] = None
    client_id: Optional[str] = None


class AppointmentUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[AppointmentType] = None
    date: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=5000)
    case_id: Optional[str] = None
    client_id: Optional[str] = None


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    type: str
    date: str
    location: Optional[str] = None
    notes: Optional[str] = None
    case_id: Optional[str] = None
    client_id: Optional[str] = None
    lawyer_id: str
    created_at: Optional[str] = None


# Documents
class DocumentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=100)
    content: Optional[str] = None
    status: DocumentStatus = "draft"
    case_id: Optional[str] = None
    client_id: Optional[str] = None


class DocumentUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    content: Optional[str] = None
    status: Optional[DocumentStatus] = None
    case_id: Optional[str] = None
    client_id: Optional[str] = None


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    type: str
    content: Optional[str] = None
    status: str
    case_id: Optional[str] = None
    client_id: Optional[str] = None
    lawyer_id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# Invoices
class InvoiceItemInput(BaseModel):
    description: str = Field(..., min_length=1, max_length=500)
    amount: float = Field(..., ge=0)


class InvoiceItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    description: str
    amount: float
    invoice_id: str
    created_at: Optional[str] = None


class InvoiceCreate(BaseModel):
    client_id: str
    status: InvoiceStatus = "unpaid"
    date: Date = Field(default_factory=Date.today)
    due_date: Date
    amount: Optional[float] = Field(None, ge=0, description="Derived from items when items are given")
    items: List[InvoiceItemInput] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_amount_and_dates(self):
        if self.amount is None and not self.items:
            raise ValueError("Either amount or at least one item is required")
        if self.due_date < self.date:
            raise ValueError("due_date cannot be earlier than date")
        return self


class InvoiceUpdate(BaseModel):
    client_id: Optional[str] = None
    status: Optional[InvoiceStatus] = None
    date: Optional[Date] = None
    due_date: Optional[Date] = None
    amount: Optional[float] = Field(None, ge=0)
    items: Optional[List[InvoiceItemInput]] = Field(None, description="Replaces all items when given")


class InvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    number: str
    amount: float
    status: str
    date: str
    due_date: str
    client_id: Optional[str] = None
    lawyer_id: str
    created_at: Optional[str] = None
    items: List[InvoiceItemResponse] = Field(default_factory=list)
    client: Optional[ClientRef] = None
