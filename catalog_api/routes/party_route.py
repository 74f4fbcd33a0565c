from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Path, Query, Response, status

from catalog_api.db import ContainerType, get_store
from catalog_api.models.page import Page
from catalog_api.models.party import PartyCreate, PartyPatch, PartyReplace, PartyResponse
from catalog_api.resources import PARTIES
from catalog_api.routes.outcome import etag, parse_if_match, unwrap
from catalog_api.services.resource_service import ResourceService

PARTY_PATH = "/api/v1/parties"

router = APIRouter(prefix=PARTY_PATH, tags=["parties"])


async def get_party_service() -> ResourceService:
    return ResourceService(PARTIES, await get_store(ContainerType.PARTIES))


@router.get("", response_model=Page[PartyResponse])
async def list_parties(
    name: Optional[str] = Query(None, title="Case-insensitive name fragment"),
    page_number: Optional[int] = Query(None, title="One-based page number"),
    page_size: Optional[int] = Query(None, title="Items per page (max 1000)"),
    service: ResourceService = Depends(get_party_service),
):
    return await service.list_records(name=name, page_number=page_number, page_size=page_size)


@router.get("/{party_id}", response_model=PartyResponse)
async def get_party(
    response: Response,
    party_id: str = Path(..., title="The ID of the party to retrieve"),
    service: ResourceService = Depends(get_party_service),
):
    party = unwrap(await service.get_by_id(party_id))
    response.headers["ETag"] = etag(party.version)
    return party


@router.post("", response_model=PartyResponse, status_code=status.HTTP_201_CREATED)
async def add_new_party(
    response: Response,
    party: PartyCreate,
    service: ResourceService = Depends(get_party_service),
):
    created = unwrap(await service.create(party))
    response.headers["Location"] = f"{PARTY_PATH}/{created.id}"
    response.headers["ETag"] = etag(created.version)
    return created


@router.put("/{party_id}", status_code=status.HTTP_204_NO_CONTENT)
async def replace_existing_party(
    party: PartyReplace,
    party_id: str = Path(..., title="The ID of the party to update"),
    if_match: Optional[str] = Header(None, alias="If-Match"),
    service: ResourceService = Depends(get_party_service),
):
    updated = unwrap(
        await service.update(party_id, party, expected_version=parse_if_match(if_match))
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers={"ETag": etag(updated.version)})


@router.patch("/{party_id}", status_code=status.HTTP_204_NO_CONTENT)
async def patch_existing_party(
    party: PartyPatch,
    party_id: str = Path(..., title="The ID of the party to patch"),
    if_match: Optional[str] = Header(None, alias="If-Match"),
    service: ResourceService = Depends(get_party_service),
):
    patched = unwrap(
        await service.patch(party_id, party, expected_version=parse_if_match(if_match))
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers={"ETag": etag(patched.version)})


@router.delete("/{party_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_existing_party(
    party_id: str = Path(..., title="The ID of the party to delete"),
    service: ResourceService = Depends(get_party_service),
):
    if not await service.delete(party_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Party with ID '{party_id}' not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
