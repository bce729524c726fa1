"""Stock photo search for trip banners."""

from fastapi import APIRouter, Depends, Query

from globetrotter.core.dependencies import USER_OR_ADMIN, get_photo_search
from globetrotter.core.session_store import UserContext
from globetrotter.schemas.base import Envelope
from globetrotter.schemas.photo import PhotoSearchResponse
from globetrotter.services.photo_search_service import PexelsPhotoService

router = APIRouter(prefix="/api/photos", tags=["photos"])


@router.get("/search", response_model=Envelope[PhotoSearchResponse])
async def search_photos(
    query: str = Query(..., min_length=1, max_length=100),
    per_page: int = Query(1, ge=1, le=15),
    photos: PexelsPhotoService = Depends(get_photo_search),
    current_user: UserContext = Depends(USER_OR_ADMIN),
):
    """
    Search stock photos; an empty result still carries a fallback banner URL
    """
    results = await photos.search(query, per_page=per_page)
    return Envelope(data=PhotoSearchResponse(
        query=query,
        photos=results,
        fallback_url=PexelsPhotoService.fallback_image(query),
    ))
