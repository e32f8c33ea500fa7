"""
Product export

Builds the JSON and CSV payloads returned by the `export_products` action.
"""
import csv
import io
from decimal import Decimal
from typing import Iterable, List

from store_admin.domain.product import Product

CSV_HEADERS = ["ID", "Name", "Description", "Category", "SKU", "Price", "Stock", "Status", "Tags", "Created"]


def _format_price(price) -> str:
    if price is None:
        return "0"
    value = Decimal(str(price)).normalize()
    return format(value, "f")


def product_csv_row(product: Product) -> List[str]:
    """One CSV row; price/SKU/stock come from the first variant"""
    variant = product.variants[0] if product.variants else None

    return [
        product.id,
        product.name,
        (product.description or "").replace(",", ";"),
        product.category.name if product.category else "",
        (variant.sku or "") if variant else "",
        _format_price(variant.price) if variant else "0",
        str(variant.stock) if variant else "0",
        "Active" if product.is_active else "Inactive",
        ";".join(product.tags),
        product.created_at.date().isoformat() if product.created_at else "",
    ]


def products_to_csv(products: Iterable[Product]) -> str:
    """
    Render products as CSV

    The header line is plain; every data value is quoted.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for product in products:
        writer.writerow(product_csv_row(product))

    rows = buffer.getvalue().rstrip("\n")
    header = ",".join(CSV_HEADERS)
    return f"{header}\n{rows}" if rows else header
