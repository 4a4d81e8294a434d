"""
==============================================================================
Product Catalog Endpoints
==============================================================================

Endpoints for listing, filtering, reading and exporting catalog products.

==============================================================================
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from catalog_api.catalog.criteria import FilterCriteria
from catalog_api.config import Settings, get_settings
from catalog_api.core import exceptions
from catalog_api.core.dependencies import get_product_export_service, get_product_query_service
from catalog_api.schemas.common import ErrorResponse
from catalog_api.schemas.product import (
    NameListResponse,
    ProductListResponse,
    ProductResponse,
    ProductStatsResponse,
)
from catalog_api.services.product_export_service import (
    JSON_MEDIA_TYPE,
    XLSX_MEDIA_TYPE,
    ProductExportService,
)
from catalog_api.services.product_query_service import ProductQueryService


router = APIRouter(prefix="/products", tags=["Products"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


class ProductController:
    """Controller for product catalog operations."""

    def __init__(self, service: ProductQueryService, settings: Settings):
        self._service = service
        self._settings = settings

    def list_products(self, criteria: FilterCriteria) -> ProductListResponse:
        """List products matching the filter criteria."""
        if criteria.page_size is not None and criteria.page_size > self._settings.max_page_size:
            raise exceptions.invalid_argument(
                f"Page size must not exceed {self._settings.max_page_size}",
                page_size=criteria.page_size,
            )

        products, pagination = self._service.list_products(criteria)
        return ProductListResponse(products=products, pagination=pagination)

    def get_product(self, product_id: int, currency: Optional[str]) -> ProductResponse:
        """Get one product."""
        return ProductResponse(product=self._service.get_product(product_id, currency))

    def get_stats(self) -> ProductStatsResponse:
        """Get catalog statistics."""
        return ProductStatsResponse(stats=self._service.get_stats())

    def get_categories(self) -> NameListResponse:
        """Get all category names."""
        names = self._service.list_categories()
        return NameListResponse(total=len(names), items=names)

    def get_attributes(self) -> NameListResponse:
        """Get all attribute names."""
        names = self._service.list_attributes()
        return NameListResponse(total=len(names), items=names)


def get_controller(
    service: ProductQueryService = Depends(get_product_query_service),
    settings: Settings = Depends(get_settings),
) -> ProductController:
    return ProductController(service, settings)


@router.post("/list", response_model=ProductListResponse, responses=ERROR_RESPONSES)
def list_products(
    criteria: FilterCriteria,
    controller: ProductController = Depends(get_controller),
):
    """
    List active products with filters.

    Attribute filters must all match; category filters match any.
    """
    return controller.list_products(criteria)


@router.get("/stats", response_model=ProductStatsResponse)
def get_product_stats(controller: ProductController = Depends(get_controller)):
    """Get total/active/inactive product counts."""
    return controller.get_stats()


@router.get("/categories", response_model=NameListResponse)
def get_product_categories(controller: ProductController = Depends(get_controller)):
    """Get all category names."""
    return controller.get_categories()


@router.get("/attributes", response_model=NameListResponse)
def get_product_attributes(controller: ProductController = Depends(get_controller)):
    """Get all attribute names."""
    return controller.get_attributes()


def _download(body: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment;filename="{filename}"'},
    )


@router.get("/export/json", response_class=Response)
def export_products_json(exporter: ProductExportService = Depends(get_product_export_service)):
    """Download every product, active or not, as a JSON file."""
    return _download(exporter.to_json(), JSON_MEDIA_TYPE, exporter.filename("json"))


@router.get("/export/xls", response_class=Response)
def export_products_xls(exporter: ProductExportService = Depends(get_product_export_service)):
    """Download every product as an Excel workbook."""
    return _download(exporter.to_xlsx(), XLSX_MEDIA_TYPE, exporter.filename("xlsx"))


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}, **ERROR_RESPONSES},
)
def get_product(
    product_id: int,
    currency: Optional[str] = Query(None, description="Display currency, e.g. USD"),
    controller: ProductController = Depends(get_controller),
):
    """Get one product by id, priced in the requested currency."""
    return controller.get_product(product_id, currency)
