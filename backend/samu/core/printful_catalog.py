"""Printful Catalog — static t-shirt variant map and payload builders.

Invariants:
    - VARIANT_MAP is the offline source of truth for Bella+Canvas 3001 (product 71)
    - build_sync_variants() only emits combos present in the map
"""

TSHIRT_PRODUCT_ID = 71
TSHIRT_PRODUCT_NAME = "Bella + Canvas 3001 Unisex Short Sleeve Jersey T-Shirt"
DEFAULT_SIZES = ["S", "M", "L", "XL", "2XL"]
DEFAULT_COLORS = ["Black", "White"]
FALLBACK_VARIANT_ID = 4018  # Black / M

VARIANT_MAP: dict[str, dict[str, int]] = {
    "White": {"S": 4011, "M": 4012, "L": 4013, "XL": 4014, "2XL": 4015},
    "Black": {"S": 4017, "M": 4018, "L": 4019, "XL": 4020, "2XL": 4021},
    "Navy": {"S": 4023, "M": 4024, "L": 4025, "XL": 4026, "2XL": 4027},
    "Red": {"S": 4029, "M": 4030, "L": 4031, "XL": 4032, "2XL": 4033},
    "Royal": {"S": 4035, "M": 4036, "L": 4037, "XL": 4038, "2XL": 4039},
}

# Front print area used for on-demand mockups
MOCKUP_POSITION = {
    "area_width": 1800,
    "area_height": 2400,
    "width": 1800,
    "height": 1800,
    "top": 300,
    "left": 0,
}


def resolve_variant(color: str, size: str) -> int | None:
    return VARIANT_MAP.get(color, {}).get(size)


def default_variant(colors: list[str] | None, sizes: list[str] | None) -> int:
    """Variant for the first colour/size of a goods item, Black/M when unknown."""
    color = (colors or ["Black"])[0]
    size = (sizes or ["M"])[0]
    return resolve_variant(color, size) or FALLBACK_VARIANT_ID


def mockup_variant_ids(colors: list[str] | None, sizes: list[str] | None) -> list[int]:
    """First colour's variant, plus a second colour in the same size when available."""
    first_color = (colors or ["Black"])[0]
    first_size = (sizes or ["M"])[0]
    ids = [default_variant(colors, sizes)]
    second = next((c for c in colors or [] if c != first_color), None)
    if second:
        second_id = resolve_variant(second, first_size)
        if second_id:
            ids.append(second_id)
    return ids


def build_sync_variants(
    colors: list[str], sizes: list[str], retail_price: float, image_url: str,
) -> list[dict]:
    return [
        {
            "variant_id": variant_id,
            "retail_price": f"{retail_price:.2f}",
            "files": [{"url": image_url}],
        }
        for color in colors
        for size in sizes
        if (variant_id := resolve_variant(color, size))
    ]


def offline_variants() -> dict:
    return {
        "product_id": TSHIRT_PRODUCT_ID,
        "product_name": TSHIRT_PRODUCT_NAME,
        "variants": VARIANT_MAP,
        "available_colors": list(VARIANT_MAP),
        "available_sizes": list(DEFAULT_SIZES),
    }


def group_variants(product: dict) -> dict:
    """Reshape Printful's /products/{id} result into colour -> size -> variant_id."""
    color_size: dict[str, dict[str, int]] = {}
    colors: list[str] = []
    sizes: list[str] = []
    for variant in product.get("variants") or []:
        color = variant.get("color") or "Unknown"
        size = variant.get("size") or "Unknown"
        if color not in colors:
            colors.append(color)
        if size not in sizes:
            sizes.append(size)
        color_size.setdefault(color, {})[size] = variant.get("id")
    return {
        "product_id": TSHIRT_PRODUCT_ID,
        "product_name": (product.get("product") or {}).get("title") or "Bella + Canvas 3001",
        "variants": color_size,
        "available_colors": colors,
        "available_sizes": sizes,
    }
