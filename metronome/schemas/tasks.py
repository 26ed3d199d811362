from typing import List, Optional
from pydantic import BaseModel

from .filters import TimeFilter
from .duration import Duration


class TaskOut(BaseModel):
    id: int
    name: str
    category: str
    start_time: int
    end_time: Optional[int] = None
    total_time: Optional[int] = None
    status: str

    model_config = {"from_attributes": True}

    @property
    def duration(self) -> Optional[Duration]:
        if self.total_time is None:
            return None
        return Duration.from_seconds(self.total_time)


class StartResult(BaseModel):
    id: int
    name: str
    category: str
    start_time: int


class EndResult(BaseModel):
    id: int
    name: str
    start_time: int
    end_time: int
    total_time: int
    duration: Duration


class EndAllResult(BaseModel):
    count: int
    end_time: int


class WindowOut(BaseModel):
    filter: TimeFilter
    cutoff: int
    recognized: bool
    label: str


class TaskList(BaseModel):
    window: WindowOut
    count: int
    tasks: List[TaskOut]


class CategoryTotal(BaseModel):
    category: str
    total_seconds: int
    duration: Duration


class CategoryTotals(BaseModel):
    window: WindowOut
    category: Optional[str] = None
    totals: List[CategoryTotal]
