"""
Recordbook — Record Route Handlers
====================================

What:  The four record endpoints: list, get, update and create.
How:   Extracts the path id and JSON body, delegates to RecordService,
       returns the record(s) or a message document.
Who:   Called by any HTTP client (the browser front end, scripts, curl).

Status codes:
    200: success on every endpoint (create included; nothing is returned
         but a message)
    400: POST /save with a required field missing   (ValidationError)
    404: unknown id on GET/PUT /records/{id}         (NotFoundError)
    500: the data file could not be written          (StorageError)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends

from recordbook.schemas.record import ErrorResponse, MessageResponse, Record, RecordPayload
from recordbook.services.record_service import parse_record_id, record_service
from recordbook.storage import RecordStore, get_record_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Records"])


@router.get(
    "/records",
    response_model=List[Record],
    summary="List every record",
    description="Returns the whole collection in insertion order. No pagination.",
)
async def list_records(
    store: RecordStore = Depends(get_record_store),
) -> List[Record]:
    return await record_service.list_records(store)


@router.get(
    "/records/{record_id}",
    response_model=Record,
    responses={
        404: {"description": "Record not found", "model": ErrorResponse},
    },
    summary="Get a single record by id",
)
async def get_record(
    record_id: str,
    store: RecordStore = Depends(get_record_store),
) -> Record:
    """
    The id is taken from the leading digits of the path segment, so a
    non-numeric segment is simply a record that does not exist (404).
    """
    return await record_service.get_record(store, parse_record_id(record_id))


@router.put(
    "/records/{record_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Record not found", "model": ErrorResponse},
        500: {"description": "Records could not be saved", "model": ErrorResponse},
    },
    summary="Replace an existing record",
    description=(
        "Replaces title, description, startDate, endDate and status of the record. "
        "Fields missing from the body are stored as null."
    ),
)
async def update_record(
    record_id: str,
    payload: Optional[RecordPayload] = Body(default=None),
    store: RecordStore = Depends(get_record_store),
) -> MessageResponse:
    await record_service.update_record(
        store,
        parse_record_id(record_id),
        payload or RecordPayload(),
    )
    return MessageResponse(message="Record updated successfully")


@router.post(
    "/save",
    response_model=MessageResponse,
    responses={
        400: {"description": "A required field is missing", "model": ErrorResponse},
        500: {"description": "Records could not be saved", "model": ErrorResponse},
    },
    summary="Create a new record",
    description=(
        "All of title, description, startDate, endDate and status are required. "
        "The new record gets id max(existing) + 1."
    ),
)
async def save_record(
    payload: Optional[RecordPayload] = Body(default=None),
    store: RecordStore = Depends(get_record_store),
) -> MessageResponse:
    record = await record_service.create_record(store, payload or RecordPayload())
    logger.debug("Saved record %d", record.id)
    return MessageResponse(message="Record saved successfully")
