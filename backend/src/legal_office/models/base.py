"""
Declarative base and column helpers shared by every model.
"""

import uuid
from datetime import datetime

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_id() -> str:
    """Primary keys are UUID4 strings."""
    return str(uuid.uuid4())


def utcnow_iso() -> str:
    """Timestamps are stored as ISO-8601 strings."""
    return datetime.utcnow().isoformat()
