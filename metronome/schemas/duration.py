from pydantic import BaseModel, Field


class Duration(BaseModel):
    hours: int
    minutes: int
    seconds: int
    raw: int = Field(ge=0)

    @classmethod
    def from_seconds(cls, total_seconds: int) -> "Duration":
        total_seconds = int(total_seconds)
        hours, remainder = divmod(total_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        return cls(hours=hours, minutes=minutes, seconds=seconds, raw=total_seconds)

    def format(self) -> str:
        return f"{self.hours}h {self.minutes}m {self.seconds}s"

    def __str__(self) -> str:
        return self.format()
