"""Batch API endpoints, including sources, attributes and lineage."""
from fastapi import APIRouter, status

from app.core.dependencies import CurrentUser, DbSession
from app.schemas.common import MessageResponse
from app.schemas.batch import (
    BatchCreate, BatchUpdate, BatchResponse, BatchDetailResponse, BatchListResponse,
    BatchSourceCreate, BatchSourceUpdate, BatchSourceResponse, BatchSourceListResponse,
    BatchAttributeCreate, BatchAttributeUpdate, BatchAttributeResponse,
    BatchAttributeListResponse, BatchRelationCreate, BatchRelationResponse
)
from app.services.batch_attributes import BatchAttributeService
from app.services.batch_sources import BatchSourceService
from app.services.batches import BatchService


router = APIRouter()


@router.get("", response_model=BatchListResponse)
async def list_batches(company_id: str, user: CurrentUser, db: DbSession):
    """List batches of the company, newest first."""
    batches = await BatchService.list_batches(db, user.id, company_id)
    return BatchListResponse(batches=[BatchResponse.model_validate(b) for b in batches])


@router.post("", response_model=BatchResponse, status_code=status.HTTP_201_CREATED)
async def create_batch(company_id: str, request: BatchCreate, user: CurrentUser, db: DbSession):
    batch = await BatchService.create_batch(db, user.id, company_id, request)
    return BatchResponse.model_validate(batch)


@router.get("/{batch_id}", response_model=BatchDetailResponse)
async def get_batch(company_id: str, batch_id: str, user: CurrentUser, db: DbSession):
    """Get a batch with its sources, attributes and lineage."""
    batch, parents, children = await BatchService.get_batch(db, user.id, company_id, batch_id)
    return BatchDetailResponse(
        **BatchResponse.model_validate(batch).model_dump(),
        sources=[BatchSourceResponse.model_validate(s) for s in batch.sources],
        attributes=[BatchAttributeResponse.model_validate(a) for a in batch.attributes],
        parents=[BatchRelationResponse.model_validate(r) for r in parents],
        children=[BatchRelationResponse.model_validate(r) for r in children],
    )


@router.put("/{batch_id}", response_model=BatchResponse)
async def update_batch(
    company_id: str,
    batch_id: str,
    request: BatchUpdate,
    user: CurrentUser,
    db: DbSession,
):
    batch = await BatchService.update_batch(db, user.id, company_id, batch_id, request)
    return BatchResponse.model_validate(batch)


@router.delete("/{batch_id}", response_model=MessageResponse)
async def delete_batch(company_id: str, batch_id: str, user: CurrentUser, db: DbSession):
    """Delete a batch with its sources, attributes and relations."""
    await BatchService.delete_batch(db, user.id, company_id, batch_id)
    return MessageResponse(message="Batch deleted successfully")


# Lineage

@router.post(
    "/{batch_id}/relations",
    response_model=BatchRelationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def link_batches(
    company_id: str,
    batch_id: str,
    request: BatchRelationCreate,
    user: CurrentUser,
    db: DbSession,
):
    relation = await BatchService.link_batches(
        db, user.id, company_id, batch_id, request.child_batch_id
    )
    return BatchRelationResponse.model_validate(relation)


@router.delete("/{batch_id}/relations/{relation_id}", response_model=MessageResponse)
async def unlink_batches(
    company_id: str,
    batch_id: str,
    relation_id: str,
    user: CurrentUser,
    db: DbSession,
):
    await BatchService.unlink_batches(db, user.id, company_id, batch_id, relation_id)
    return MessageResponse(message="Batch relation deleted successfully")


# Sources

@router.get("/{batch_id}/sources", response_model=BatchSourceListResponse)
async def list_sources(company_id: str, batch_id: str, user: CurrentUser, db: DbSession):
    sources = await BatchSourceService.list_sources(db, user.id, company_id, batch_id)
    return BatchSourceListResponse(
        batch_sources=[BatchSourceResponse.model_validate(s) for s in sources]
    )


@router.post(
    "/{batch_id}/sources",
    response_model=BatchSourceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_source(
    company_id: str,
    batch_id: str,
    request: BatchSourceCreate,
    user: CurrentUser,
    db: DbSession,
):
    source = await BatchSourceService.create_source(db, user.id, company_id, batch_id, request)
    return BatchSourceResponse.model_validate(source)


@router.get("/{batch_id}/sources/{source_id}", response_model=BatchSourceResponse)
async def get_source(
    company_id: str,
    batch_id: str,
    source_id: str,
    user: CurrentUser,
    db: DbSession,
):
    source = await BatchSourceService.get_source(db, user.id, company_id, batch_id, source_id)
    return BatchSourceResponse.model_validate(source)


@router.put("/{batch_id}/sources/{source_id}", response_model=BatchSourceResponse)
async def update_source(
    company_id: str,
    batch_id: str,
    source_id: str,
    request: BatchSourceUpdate,
    user: CurrentUser,
    db: DbSession,
):
    source = await BatchSourceService.update_source(
        db, user.id, company_id, batch_id, source_id, request
    )
    return BatchSourceResponse.model_validate(source)


@router.delete("/{batch_id}/sources/{source_id}", response_model=MessageResponse)
async def delete_source(
    company_id: str,
    batch_id: str,
    source_id: str,
    user: CurrentUser,
    db: DbSession,
):
    await BatchSourceService.delete_source(db, user.id, company_id, batch_id, source_id)
    return MessageResponse(message="Batch source deleted successfully")


# Attributes

@router.get("/{batch_id}/attributes", response_model=BatchAttributeListResponse)
async def list_attributes(company_id: str, batch_id: str, user: CurrentUser, db: DbSession):
    attributes = await BatchAttributeService.list_attributes(db, user.id, company_id, batch_id)
    return BatchAttributeListResponse(
        batch_attributes=[BatchAttributeResponse.model_validate(a) for a in attributes]
    )


@router.post(
    "/{batch_id}/attributes",
    response_model=BatchAttributeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_attribute(
    company_id: str,
    batch_id: str,
    request: BatchAttributeCreate,
    user: CurrentUser,
    db: DbSession,
):
    attribute = await BatchAttributeService.create_attribute(
        db, user.id, company_id, batch_id, request
    )
    return BatchAttributeResponse.model_validate(attribute)


@router.get("/{batch_id}/attributes/{attribute_id}", response_model=BatchAttributeResponse)
async def get_attribute(
    company_id: str,
    batch_id: str,
    attribute_id: str,
    user: CurrentUser,
    db: DbSession,
):
    attribute = await BatchAttributeService.get_attribute(
        db, user.id, company_id, batch_id, attribute_id
    )
    return BatchAttributeResponse.model_validate(attribute)


@router.put("/{batch_id}/attributes/{attribute_id}", response_model=BatchAttributeResponse)
async def update_attribute(
    company_id: str,
    batch_id: str,
    attribute_id: str,
    request: BatchAttributeUpdate,
    user: CurrentUser,
    db: DbSession,
):
    attribute = await BatchAttributeService.update_attribute(
        db, user.id, company_id, batch_id, attribute_id, request
    )
    return BatchAttributeResponse.model_validate(attribute)


@router.delete("/{batch_id}/attributes/{attribute_id}", response_model=MessageResponse)
async def delete_attribute(
    company_id: str,
    batch_id: str,
    attribute_id: str,
    user: CurrentUser,
    db: DbSession,
):
    await BatchAttributeService.delete_attribute(db, user.id, company_id, batch_id, attribute_id)
    return MessageResponse(message="Batch attribute deleted successfully")
