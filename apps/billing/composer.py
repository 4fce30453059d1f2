# apps/billing/composer.py
"""
Invoice item composition.

Turns the raw item payload of a create/update request into validated,
priced InvoiceItem instances (unsaved) plus their subtotal.

An item either references a catalog service or is fully custom:

    {'service': 3, 'quantity': 2}                          # priced from catalog
    {'service': 3, 'quantity': 2, 'unit_price': '900'}     # catalog link, explicit price
    {'name': 'Notice reply', 'quantity': 1, 'unit_price': '2500'}

Catalog values are copied only where the caller leaves them out. Values
the caller sends are kept as-is, so re-submitting an already-saved item
never re-prices it from today's catalog.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from .exceptions import InvalidArgument, NotFound
from .models import InvoiceItem, ServiceItem, quantize_money


@dataclass
class ComposedItems:
    items: list = field(default_factory=list)
    subtotal: Decimal = Decimal('0.00')


def _to_decimal(value, field_name, position):
    if isinstance(value, float):
        value = str(value)
    try:
        number = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        number = None
    if number is None or not number.is_finite():
        raise InvalidArgument(
            f"Item {position}: {field_name} must be a number",
            field=field_name,
        )
    return number


def _load_services(raw_items):
    ids = {raw.get('service') for raw in raw_items if raw.get('service') is not None}
    if not ids:
        return {}
    return {svc.pk: svc for svc in ServiceItem.objects.filter(pk__in=ids)}


def compose_item(raw, position, services):
    """
    Validate and price a single raw item.

    Args:
        raw: dict with service/name/description/quantity/unit_price
        position: 1-based index, used for ordering and error messages
        services: {id: ServiceItem} prefetched for the whole payload

    Returns:
        InvoiceItem (unsaved, no invoice set)

    Raises:
        NotFound: referenced service does not exist
        InvalidArgument: missing name/price, quantity <= 0, price < 0
    """
    service = None
    service_id = raw.get('service')
    name = raw.get('name')
    description = raw.get('description')
    unit_price = raw.get('unit_price')

    if service_id is not None:
        service = services.get(service_id)
        if service is None:
            raise NotFound(f"Service {service_id} not found", service=service_id)
        if unit_price is None:
            if not service.is_active:
                raise InvalidArgument(
                    f"Service '{service.name}' is inactive and cannot be used as a price template"
                )
            unit_price = service.base_price
        if not name:
            name = service.name
        if description is None:
            description = service.description

    if not name:
        raise InvalidArgument(f"Item {position}: name is required", field='name')
    if unit_price is None:
        raise InvalidArgument(f"Item {position}: unit_price is required", field='unit_price')

    # Checks apply to the stored 2-place values
    quantity = quantize_money(_to_decimal(raw.get('quantity', 1), 'quantity', position))
    unit_price = quantize_money(_to_decimal(unit_price, 'unit_price', position))

    if quantity <= 0:
        raise InvalidArgument(f"Item {position}: quantity must be greater than zero", field='quantity')
    if unit_price < 0:
        raise InvalidArgument(f"Item {position}: unit_price cannot be negative", field='unit_price')

    return InvoiceItem(
        position=position,
        service=service,
        name=name,
        description=description or '',
        quantity=quantity,
        unit_price=unit_price,
        amount=quantize_money(quantity * unit_price),
    )


def compose_items(raw_items):
    """
    Validate and price an invoice's full item list.

    Returns:
        ComposedItems with unsaved InvoiceItem instances and their subtotal

    Raises:
        InvalidArgument: empty list or any invalid item
        NotFound: any referenced service missing
    """
    if not raw_items:
        raise InvalidArgument("An invoice needs at least one item", field='items')

    services = _load_services(raw_items)
    composed = ComposedItems()
    for position, raw in enumerate(raw_items, start=1):
        item = compose_item(raw, position, services)
        composed.items.append(item)
        composed.subtotal += item.amount

    composed.subtotal = quantize_money(composed.subtotal)
    return composed
