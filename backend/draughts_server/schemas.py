from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class CoordinateModel(BaseModel):
    # Any integer; off-board values come back as an out_of_bounds rejection.
    col: int
    row: int


class MoveRequest(BaseModel):
    start: CoordinateModel
    end: CoordinateModel


class RulesPayload(BaseModel):
    mandatoryCapture: Optional[bool] = Field(
        default=None, description="Reject quiet moves while a capture is available."
    )


class ConfigRequest(BaseModel):
    rules: RulesPayload


class ResetRequest(BaseModel):
    rules: Optional[RulesPayload] = None
