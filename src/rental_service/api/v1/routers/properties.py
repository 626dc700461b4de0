from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from rental_service.api.deps import CurrentPrincipal, ImageStorageDep, UoWDep
from rental_service.api.v1.schemas.common import MessageResponse
from rental_service.api.v1.schemas.property import PropertyResponse
from rental_service.application.dto.property import PropertyDraftDTO, PropertyFilterDTO
from rental_service.application.exceptions import ValidationError
from rental_service.application.ports.storage import ImageStorage
from rental_service.config import settings
from rental_service.domain.value_objects.enums import PropertyType
from rental_service.services import property_service

router = APIRouter(prefix="/api", tags=["properties"])

ImagesForm = Annotated[list[UploadFile] | None, File()]


async def _store_images(files: list[UploadFile] | None, storage: ImageStorage) -> list[str]:
    files = [f for f in files or [] if f.filename]
    if len(files) > settings.UPLOAD_MAX_FILES:
        raise ValidationError(f"At most {settings.UPLOAD_MAX_FILES} images per listing")
    urls = []
    for upload in files:
        content = await upload.read()
        urls.append(await storage.save(upload.filename or "image", content, upload.content_type))
    return urls


@router.get("/properties", response_model=list[PropertyResponse])
async def search_properties(
    uow: UoWDep,
    location: str | None = Query(None),
    type: PropertyType | None = Query(None),
    min_price: int | None = Query(None, alias="minPrice", ge=0),
    max_price: int | None = Query(None, alias="maxPrice", ge=0),
    bedrooms: int | None = Query(None, ge=0),
) -> list[PropertyResponse]:
    filters = PropertyFilterDTO(
        location=location or None,
        type=type,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
    )
    props = await property_service.search(filters, uow)
    return [PropertyResponse.model_validate(p) for p in props]


@router.get("/properties/featured", response_model=list[PropertyResponse])
async def featured_properties(uow: UoWDep) -> list[PropertyResponse]:
    props = await property_service.list_featured(settings.FEATURED_LIMIT, uow)
    return [PropertyResponse.model_validate(p) for p in props]


@router.get("/properties/{property_id}", response_model=PropertyResponse)
async def get_property(property_id: UUID, uow: UoWDep) -> PropertyResponse:
    prop = await property_service.get_property(property_id, uow)
    return PropertyResponse.model_validate(prop)


@router.post(
    "/properties",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_property(
    principal: CurrentPrincipal,
    uow: UoWDep,
    storage: ImageStorageDep,
    title: Annotated[str, Form(min_length=1)],
    location: Annotated[str, Form(min_length=1)],
    city: Annotated[str, Form(min_length=1)],
    price: Annotated[int, Form(ge=0)],
    type: Annotated[PropertyType, Form()],
    description: Annotated[str | None, Form()] = None,
    bedrooms: Annotated[int, Form(ge=0)] = 0,
    bathrooms: Annotated[int, Form(ge=0)] = 0,
    size: Annotated[int, Form(ge=0)] = 0,
    featured: Annotated[bool, Form()] = False,
    images: ImagesForm = None,
) -> PropertyResponse:
    # Role is checked before any upload hits the disk.
    property_service.assert_can_list(principal)
    draft = PropertyDraftDTO(
        title=title,
        location=location,
        city=city,
        price=price,
        type=type,
        description=description,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        size=size,
        featured=featured,
        images=await _store_images(images, storage),
    )
    prop = await property_service.create_property(principal, draft, uow)
    return PropertyResponse.model_validate(prop)


@router.put("/properties/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
    storage: ImageStorageDep,
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    location: Annotated[str | None, Form()] = None,
    city: Annotated[str | None, Form()] = None,
    price: Annotated[int | None, Form(ge=0)] = None,
    type: Annotated[PropertyType | None, Form()] = None,
    bedrooms: Annotated[int | None, Form(ge=0)] = None,
    bathrooms: Annotated[int | None, Form(ge=0)] = None,
    size: Annotated[int | None, Form(ge=0)] = None,
    featured: Annotated[bool | None, Form()] = None,
    available: Annotated[bool | None, Form()] = None,
    images: ImagesForm = None,
) -> PropertyResponse:
    await property_service.get_owned(principal, property_id, uow)
    changes = {
        "title": title,
        "description": description,
        "location": location,
        "city": city,
        "price": price,
        "type": type,
        "bedrooms": bedrooms,
        "bathrooms": bathrooms,
        "size": size,
        "featured": featured,
        "available": available,
        "images": await _store_images(images, storage),
    }
    prop = await property_service.update_property(principal, property_id, changes, uow)
    return PropertyResponse.model_validate(prop)


@router.delete("/properties/{property_id}", response_model=MessageResponse)
async def delete_property(
    property_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> MessageResponse:
    await property_service.delete_property(principal, property_id, uow)
    return MessageResponse(message="Property deleted successfully")


@router.get("/user/properties", response_model=list[PropertyResponse])
async def my_properties(principal: CurrentPrincipal, uow: UoWDep) -> list[PropertyResponse]:
    props = await property_service.list_owned(principal, uow)
    return [PropertyResponse.model_validate(p) for p in props]
