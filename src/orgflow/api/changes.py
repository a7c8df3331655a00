"""Shared helper for API endpoints that modify the document."""

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

from fastapi import HTTPException

from orgflow.document.document import Document
from orgflow.errors import DocumentUnavailableError, FormatError, InvariantViolation
from orgflow.factory import get_connection_manager, get_document_store

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def commit(mutate: Callable[[Document], T]) -> T:
    """Apply mutate to the document, save it and notify WebSocket clients.

    Raises:
        HTTPException: 400 for grammar errors, 404 for unknown indices,
            409 if the result could not be saved as valid text or the
            document failed to load, 500 otherwise
    """
    store = get_document_store()
    try:
        result = await asyncio.to_thread(store.update, mutate)
    except FormatError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except InvariantViolation as e:
        logger.warning(f"Rejected change: {e}")
        raise HTTPException(status_code=409, detail=str(e)) from e
    except DocumentUnavailableError as e:
        logger.warning(f"Rejected change to unloaded document: {e}")
        raise HTTPException(status_code=409, detail=str(e)) from e
    except Exception as e:
        logger.exception(f"Error saving document: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e

    await get_connection_manager().notify_document_changed(store.size())
    return result
