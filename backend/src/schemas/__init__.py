"""Pydantic schemas for the governance API"""

from .business_rules import EvaluationResponse, TransitionsResponse, ViolationResponse

__all__ = [
    "EvaluationResponse",
    "TransitionsResponse",
    "ViolationResponse",
]
