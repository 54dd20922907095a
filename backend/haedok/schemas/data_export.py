from typing import Literal

from pydantic import BaseModel

from haedok.schemas.subscription import UsageObservation


class UsageImportResult(BaseModel):
    total_rows: int
    imported: int
    skipped: int
    errors: list[str]
    observations: list[UsageObservation]


ExportFormat = Literal["csv", "xlsx"]
