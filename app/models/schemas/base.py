"""
Base schemas used across the application: the GraphQL-over-HTTP envelope
and the API error envelope.
"""
from typing import Optional, Any, Dict, List, Union
from pydantic import BaseModel, ConfigDict

class GraphQLErrorLocation(BaseModel):
    line: int
    column: int

class GraphQLErrorEntry(BaseModel):
    message: str
    locations: Optional[List[GraphQLErrorLocation]] = None
    path: Optional[List[Union[str, int]]] = None

    model_config = ConfigDict(extra="allow")

class GraphQLResponse(BaseModel):
    """``{data?, errors?}`` body of a GraphQL response."""
    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[GraphQLErrorEntry]] = None

class ErrorResponse(BaseModel):
    """Body of every error response: ``{success: false, message, request_id}``.

    ``details`` carries the per-field entries of a validation failure.
    """
    success: bool = False
    message: Any
    request_id: str
    details: Optional[List[Dict[str, Any]]] = None
