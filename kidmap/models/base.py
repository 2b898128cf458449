"""
Base model class with common fields
"""

from sqlalchemy import Column, String
import uuid

from kidmap.core.database import Base


# Length of primary keys, including user ids taken from token subjects
ID_LENGTH = 64


def new_id() -> str:
    return str(uuid.uuid4())


class BaseModel(Base):
    """
    Abstract base model with a string primary key
    """
    __abstract__ = True

    id = Column(
        String(ID_LENGTH),
        primary_key=True,
        default=new_id,
        nullable=False
    )
