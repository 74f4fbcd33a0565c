from typing import Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Path, Query, Response, status

from catalog_api.db import ContainerType, get_store
from catalog_api.logging_config import get_child_logger
from catalog_api.models.page import Page
from catalog_api.models.product import (
    ProductCategory,
    ProductCreate,
    ProductPatch,
    ProductReplace,
    ProductResponse,
)
from catalog_api.resources import PRODUCTS
from catalog_api.routes.outcome import etag, parse_if_match, unwrap
from catalog_api.services.resource_service import ResourceService

logger = get_child_logger("routes.product")

PRODUCT_PATH = "/api/v1/products"

router = APIRouter(prefix=PRODUCT_PATH, tags=["products"])


async def get_product_service() -> ResourceService:
    return ResourceService(PRODUCTS, await get_store(ContainerType.PRODUCTS))


@router.get("", response_model=Page[ProductResponse])
async def list_products(
    name: Optional[str] = Query(None, title="Case-insensitive name fragment"),
    category: Optional[ProductCategory] = Query(None, title="The category to filter products by"),
    show_inventory: Optional[bool] = Query(None, title="False hides quantity on hand"),
    page_number: Optional[int] = Query(None, title="One-based page number"),
    page_size: Optional[int] = Query(None, title="Items per page (max 1000)"),
    service: ResourceService = Depends(get_product_service),
):
    logger.info(
        "Handling GET /products request",
        extra={"product_name": name, "category": category, "page_number": page_number},
    )
    return await service.list_records(
        name=name,
        category=category,
        page_number=page_number,
        page_size=page_size,
        show_inventory=show_inventory,
    )


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    response: Response,
    product_id: str = Path(..., title="The ID of the product to retrieve"),
    service: ResourceService = Depends(get_product_service),
):
    product = unwrap(await service.get_by_id(product_id))
    response.headers["ETag"] = etag(product.version)
    return product


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def add_new_product(
    response: Response,
    product: ProductCreate = Body(..., description="Product information to create"),
    service: ResourceService = Depends(get_product_service),
):
    created = unwrap(await service.create(product))
    response.headers["Location"] = f"{PRODUCT_PATH}/{created.id}"
    response.headers["ETag"] = etag(created.version)
    return created


@router.put("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def replace_existing_product(
    product: ProductReplace,
    product_id: str = Path(..., title="The ID of the product to update"),
    if_match: Optional[str] = Header(
        None,
        alias="If-Match",
        description="Version from the previous GET request for optimistic concurrency",
    ),
    service: ResourceService = Depends(get_product_service),
):
    updated = unwrap(
        await service.update(product_id, product, expected_version=parse_if_match(if_match))
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers={"ETag": etag(updated.version)})


@router.patch("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def patch_existing_product(
    product: ProductPatch,
    product_id: str = Path(..., title="The ID of the product to patch"),
    if_match: Optional[str] = Header(
        None,
        alias="If-Match",
        description="Version from the previous GET request for optimistic concurrency",
    ),
    service: ResourceService = Depends(get_product_service),
):
    patched = unwrap(
        await service.patch(product_id, product, expected_version=parse_if_match(if_match))
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers={"ETag": etag(patched.version)})


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_existing_product(
    product_id: str = Path(..., title="The ID of the product to delete"),
    service: ResourceService = Depends(get_product_service),
):
    if not await service.delete(product_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID '{product_id}' not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
