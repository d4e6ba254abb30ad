from typing import Literal

from pydantic import BaseModel, Field

PipeMaterial = Literal["copper_l", "copper_m", "pex", "cpvc", "pvc"]


class PipeSizeRequest(BaseModel):
    fixture_units: int = Field(..., gt=0, description="Total water supply fixture units")
    pipe_length: int = Field(..., gt=0, description="Developed length of the run in feet")
    material: PipeMaterial


class PipeSizeResult(BaseModel):
    recommended_size: str
    velocity_check: bool = Field(..., description="Whether flow velocity is within code limits")
    pressure_loss: float = Field(..., description="Estimated loss over the run in psi")
    explanation: str
