from typing import Any, Optional

from pydantic import BaseModel


class FailureReportCreate(BaseModel):
    # Free-form: the front end posts either a string or a small object
    addition: Any = None


class TaskCreate(BaseModel):
    task: Optional[str] = None
