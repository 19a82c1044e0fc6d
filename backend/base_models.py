from pydantic import BaseModel
from typing import Union

class OptimizationRequest(BaseModel):
    response: str

class OptimizationResponse(BaseModel):
    optimizedContent: str

class ErrorResponse(BaseModel):
    error: str

# Outcome of the upstream call. `detail` is for server logs only.
class Success(BaseModel):
    text: str

class QuotaExceeded(BaseModel):
    detail: str = ""

class Failure(BaseModel):
    detail: str

OptimizationResult = Union[Success, QuotaExceeded, Failure]
