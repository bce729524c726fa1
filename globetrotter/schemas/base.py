from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Optional, Generic, TypeVar

T = TypeVar('T')


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
    error_code: str
    details: Optional[Dict[str, Any]] = None
    request_id: Optional[str] = None


class RequestModel(BaseModel):
    """Request bodies accept camelCase keys (frontend) as well as snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def provided_fields(self) -> Dict[str, Any]:
        """Fields the client actually sent, keyed by attribute name"""
        return self.model_dump(exclude_unset=True)
