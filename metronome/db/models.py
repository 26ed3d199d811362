from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field

DEFAULT_CATEGORY = "Misc"


class TaskStatus(str, Enum):
    ACTIVE = "Active"
    COMPLETE = "Complete"


class Task(SQLModel, table=True):
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    start_time: int = Field(index=True)  # unix seconds
    end_time: Optional[int] = None
    total_time: Optional[int] = None  # seconds, end_time - start_time
    category: str = DEFAULT_CATEGORY
    status: str = Field(default=TaskStatus.ACTIVE.value, index=True)
