"""
Database models.
"""

# Import all models to ensure they are registered with SQLAlchemy
from .base import Base
from .profile import Profile
from .client import Client
from .case import Case, CaseChatMessage
from .appointment import Appointment
from .document import Document
from .invoice import Invoice, InvoiceItem
from .chat import ChatMessage
from .prompt import Prompt
from .ai_settings import AISettings, PredefinedResponse

__all__ = [
    "Base", "Profile", "Client", "Case", "CaseChatMessage", "Appointment", "Document",
    "Invoice", "InvoiceItem", "ChatMessage", "Prompt", "AISettings", "PredefinedResponse",
]
