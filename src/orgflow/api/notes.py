"""Note API endpoints."""

import logging

from fastapi import APIRouter, HTTPException

from orgflow.api.changes import commit
from orgflow.api.models import AddNoteRequest, NoteResponse
from orgflow.core.note import Note
from orgflow.document.document import Document
from orgflow.errors import InvariantViolation
from orgflow.factory import get_document_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/notes", response_model=list[NoteResponse])
async def list_notes() -> list[NoteResponse]:
    """List notes in document order."""
    store = get_document_store()
    return store.read(lambda document: [NoteResponse.from_note(n) for n in document.notes])


@router.post("/notes", response_model=NoteResponse, status_code=201)
async def add_note(request: AddNoteRequest) -> NoteResponse:
    """Add a note; tag-shaped words in title and content become note tags.

    Raises:
        HTTPException: 409 if no content is left after removing tags, or
            if a content line would read back as a heading
    """
    try:
        note = Note.from_draft(request.title, request.content)
    except InvariantViolation as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    def append(document: Document) -> NoteResponse:
        document.append_note(note)
        return NoteResponse.from_note(note)

    response = await commit(append)
    logger.info(f"Added note {response.guid}: {response.title}")
    return response
