"""Tag suggestion API endpoints."""

from fastapi import APIRouter

from orgflow.api.models import TagIndexResponse
from orgflow.factory import get_document_store

router = APIRouter()


@router.get("/tags", response_model=TagIndexResponse)
async def list_tags() -> TagIndexResponse:
    """Return all known tags, bucketed by kind."""
    return TagIndexResponse.from_index(get_document_store().tag_index())


@router.get("/tags/suggest", response_model=list[str])
async def suggest_tags(prefix: str = "") -> list[str]:
    """Complete a partially typed tag, e.g. ``@wo`` -> ``@work``.

    An empty prefix returns every known tag.
    """
    return get_document_store().tag_index().suggestions_for_prefix(prefix)
