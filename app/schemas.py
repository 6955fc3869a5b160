from pydantic import BaseModel
from typing import List, Literal
from datetime import datetime

JobName = Literal["block-creator", "block-reclaimer"]


class BlockSummary(BaseModel):
    id: str
    title: str
    start: datetime
    end: datetime
    location: str = ""


class JobRunResult(BaseModel):
    job: JobName
    ran_at: datetime
    window_start: datetime
    window_end: datetime
    scanned: int = 0

    # block-creator
    interviews: int = 0
    skipped_occupied: int = 0
    created: List[BlockSummary] = []

    # block-reclaimer
    deleted: List[BlockSummary] = []
    already_deleted: int = 0
