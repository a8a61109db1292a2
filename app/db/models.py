"""
SQLAlchemy ORM models for the scenario history.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.orm import declarative_base
import uuid

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


class SavedScenario(Base):
    """A calculated ROI scenario kept for the history list."""

    __tablename__ = "scenarios"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=True)

    # Coerced inputs and the calculated result, snake_case keys
    inputs = Column(JSON, nullable=False, default=dict)
    result = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
