from pydantic import BaseModel
from typing import List, Optional


class Photo(BaseModel):
    """A stock photo candidate for a trip banner"""
    id: int
    url: str
    photographer: Optional[str] = None
    src_large: Optional[str] = None
    src_medium: Optional[str] = None
    src_small: Optional[str] = None


class PhotoSearchResponse(BaseModel):
    query: str
    photos: List[Photo]
    fallback_url: str
