"""
Variant resolution.

Pure functions that turn a product and a shopper's option selection into
the variant to sell, the values still worth offering, and the prices to
display. Nothing here raises for an incomplete or sold-out selection;
those are ordinary ``None``/``False`` answers. Malformed products are
rejected earlier, when the catalog is loaded.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from ..core.money import to_cents, from_cents, format_money
from ..models.product import Product, ProductVariant
from ..models.resolution import Pricing, ProductView

MAX_DISCOUNT_PERCENT = 99


def implicit_variant(product: Product) -> ProductVariant:
    """The product itself as its only variant"""
    return ProductVariant(
        id=product.id,
        options={},
        price=product.price,
        compare_at_price=product.compare_at_price,
        stock_quantity=product.stock_quantity,
        available=product.in_stock,
        image=product.images[0] if product.images else None,
    )


def first_variant(product: Product) -> ProductVariant:
    """
    Variant used for initial display defaults.

    This is not a match: callers resolving a selection must use
    ``match_variant``, which never substitutes a fallback.
    """
    if product.variants:
        return product.variants[0]
    return implicit_variant(product)


def default_selection(product: Product) -> dict[str, str]:
    if not product.options:
        return {}
    return dict(first_variant(product).options)


def select_option(
    product: Product,
    selection: dict[str, str],
    option_name: str,
    value: str,
) -> dict[str, str]:
    """Return a copy of ``selection`` with one option changed.

    Unknown options or values leave the selection as it was.
    """
    updated = dict(selection)
    option = product.get_option(option_name)
    if option is not None and value in option.values:
        updated[option_name] = value
    return updated


def match_variant(product: Product, selection: dict[str, str]) -> Optional[ProductVariant]:
    """
    Find the variant whose options equal the selection.

    Selection entries for options the product does not declare are ignored.

    Returns:
        The matching variant, the implicit variant for products without
        variants or options, or None when the selection is incomplete or
        names a combination nobody sells.
    """
    if not product.has_variants:
        return None if product.options else implicit_variant(product)

    wanted = {}
    for name in product.option_names:
        if name not in selection:
            return None
        wanted[name] = selection[name]

    return next((v for v in product.variants if v.options == wanted), None)


def is_option_value_available(
    product: Product,
    selection: dict[str, str],
    option_name: str,
    value: str,
) -> bool:
    """
    Check whether picking ``value`` for ``option_name`` can lead to a sale.

    True if some in-stock variant uses that value and agrees with every
    other option the shopper has already chosen.
    """
    option = product.get_option(option_name)
    if option is None or value not in option.values:
        return False

    constraints = {
        name: selection[name]
        for name in product.option_names
        if name != option_name and name in selection
    }

    for variant in product.variants:
        if not variant.in_stock or variant.options.get(option_name) != value:
            continue
        if all(variant.options.get(name) == chosen for name, chosen in constraints.items()):
            return True
    return False


def available_values(product: Product, selection: dict[str, str]) -> dict[str, list[str]]:
    """Selectable values per option, in declared order"""
    return {
        option.name: [
            value for value in option.values
            if is_option_value_available(product, selection, option.name, value)
        ]
        for option in product.options
    }


def pricing(product: Product, variant: Optional[ProductVariant]) -> Pricing:
    """
    Compute the current price, the struck-through price and the discount.

    A compare-at price that is not strictly above the current price is
    dropped, so no negative discount is ever shown. The percentage is
    rounded half up and capped below 100. Without a resolved variant only
    the product's base price is shown.
    """
    if variant is None:
        return Pricing(current_price=from_cents(to_cents(product.price)))

    current_cents = to_cents(variant.price)
    compare_at = variant.compare_at_price
    compare_cents = to_cents(compare_at) if compare_at is not None else None
    if compare_cents is None or compare_cents <= current_cents:
        return Pricing(current_price=from_cents(current_cents))

    ratio = Decimal(compare_cents - current_cents) * 100 / Decimal(compare_cents)
    discount = int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    return Pricing(
        current_price=from_cents(current_cents),
        compare_at_price=from_cents(compare_cents),
        discount_percent=min(discount, MAX_DISCOUNT_PERCENT),
    )


def stock(product: Product, variant: Optional[ProductVariant]) -> bool:
    if variant is None:
        if product.has_variants or product.options:
            return False
        variant = implicit_variant(product)
    return variant.in_stock


def can_add_to_cart(
    product: Product,
    variant: Optional[ProductVariant],
    quantity: int = 1,
) -> bool:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        return False
    return stock(product, variant)


def resolve(
    product: Product,
    selection: dict[str, str],
    quantity: int = 1,
    currency_symbol: str = "$",
) -> ProductView:
    """Recompute a product card's state for the given selection"""
    variant = match_variant(product, selection)
    prices = pricing(product, variant)

    image = variant.image if variant is not None and variant.image else None
    if image is None and product.images:
        image = product.images[0]

    return ProductView(
        product=product,
        selection=dict(selection),
        variant=variant,
        available_values=available_values(product, selection),
        pricing=prices,
        in_stock=stock(product, variant),
        can_add_to_cart=can_add_to_cart(product, variant, quantity),
        image=image,
        formatted_price=format_money(prices.current_price, currency_symbol),
        formatted_compare_at_price=(
            format_money(prices.compare_at_price, currency_symbol)
            if prices.compare_at_price is not None
            else None
        ),
    )
