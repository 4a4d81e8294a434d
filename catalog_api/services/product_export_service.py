"""
==============================================================================
Product Export Service Module
==============================================================================

Full-catalog export as JSON or an Excel workbook.

Every product is exported, active or not, in id order. Each row carries:

    id, name, description, price, price_currency, added_time,
    last_edit_time, active, categories, attributes, icon, images

Multi-valued fields are flattened to comma-separated text
("Color: Red, Size: 10") and timestamps are formatted as
"YYYY-MM-DD HH:MM:SS", so both formats hold the same values.

==============================================================================
"""

from __future__ import annotations

import io
import json
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from catalog_api.catalog.predicates import And
from catalog_api.catalog.store import SqlProductStore
from catalog_api.db.models import Product


# Module logger
logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

JSON_MEDIA_TYPE = "application/json"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (row key, header label, column width)
XLSX_COLUMNS = [
    ("id", "ID", 10),
    ("name", "Name", 25),
    ("description", "Description", 60),
    ("price", "Price", 12),
    ("price_currency", "Currency", 10),
    ("added_time", "Added Time", 20),
    ("last_edit_time", "Last Edit", 20),
    ("active", "Active", 10),
    ("categories", "Categories", 60),
    ("attributes", "Attributes", 60),
]


class ProductExportService:
    """
    Exports the whole catalog.

    Example:
        >>> exporter = ProductExportService(SqlProductStore(db))
        >>> body = exporter.to_json()
        >>> workbook = exporter.to_xlsx()
    """

    def __init__(self, store: SqlProductStore) -> None:
        self._store = store

    def rows(self) -> List[Dict[str, Any]]:
        """One flat dict per product, in id order."""
        return [self._to_row(product) for product in self._store.find(And())]

    def to_json(self) -> bytes:
        """Pretty-printed UTF-8 JSON array of product rows."""
        rows = self.rows()
        logger.info(f"Exporting {len(rows)} products to JSON")
        return json.dumps(rows, indent=4, ensure_ascii=False).encode("utf-8")

    def to_xlsx(self) -> bytes:
        """Single-sheet workbook with a styled header row."""
        rows = self.rows()
        logger.info(f"Exporting {len(rows)} products to XLSX")

        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "Products"

        header_font = Font(bold=True, color="FFFFFF", size=12)
        header_fill = PatternFill(fill_type="solid", start_color="333333")
        thin = Side(style="thin", color="555555")
        cell_border = Border(left=thin, right=thin, top=thin, bottom=thin)

        for col_idx, (_, label, width) in enumerate(XLSX_COLUMNS, 1):
            cell = sheet.cell(row=1, column=col_idx, value=label)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center", vertical="center")
            sheet.column_dimensions[cell.column_letter].width = width

        for row_idx, row in enumerate(rows, 2):
            for col_idx, (key, _, _) in enumerate(XLSX_COLUMNS, 1):
                value = row[key]
                if key == "active":
                    value = "Yes" if value else "No"
                cell = sheet.cell(row=row_idx, column=col_idx, value=value)
                cell.border = cell_border
                cell.alignment = Alignment(horizontal="left" if col_idx > 8 else "center")

        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    @staticmethod
    def filename(extension: str, today: Optional[date] = None) -> str:
        """Download file name, e.g. products-2024-01-31.json."""
        return f"products-{(today or date.today()).isoformat()}.{extension}"

    @staticmethod
    def _to_row(product: Product) -> Dict[str, Any]:
        return {
            "id": product.id,
            "name": product.name,
            "description": product.description,
            "price": float(product.price),
            "price_currency": product.price_currency,
            "added_time": _format_time(product.added_time),
            "last_edit_time": _format_time(product.last_edit_time),
            "active": bool(product.active),
            "categories": ", ".join(product.category_names),
            "attributes": ", ".join(
                f"{name}: {value}" for name, value in product.attribute_values.items()
            ),
            "icon": product.icon.icon_file if product.icon else None,
            "images": ", ".join(image.image_file for image in product.images),
        }


def _format_time(value: Optional[datetime]) -> str:
    return value.strftime(TIME_FORMAT) if value else "N/A"
