import logging

from ..exceptions import InvalidInputError
from ..models import InventoryItem, Location, StockMovement
from .audit_helper import log_action
from .codes import next_code
from .coordinator import atomic_unit, lock_active, resolve_active
from .validation import (STOCK_IN_TYPES, STOCK_MOVEMENT_TYPES,
                         next_stock_level, require_positive,
                         to_decimal)

logger = logging.getLogger(__name__)


def _non_negative(value, field):
    value = to_decimal(value, field)
    if value < 0:
        raise InvalidInputError(f"{field} cannot be negative.", field=field, value=value)
    return value


# ----------------------------
# Inventory items
# ----------------------------
@atomic_unit
def create_inventory_item(company, name, *, user=None, opening_stock=0,
                          location=None, sku=None, category="OTHER", uom="KG",
                          unit_cost=0, reorder_level=None, description=""):
    """Create an item whose ledger starts at ``opening_stock``."""
    opening = _non_negative(opening_stock, "opening_stock")
    if location is not None:
        location = resolve_active(Location, company, location, "location")

    item = InventoryItem.objects.create(
        company=company,
        item_code=next_code(company, "ITM"),
        sku=sku or None,
        name=name,
        category=category,
        description=description,
        uom=uom,
        location=location,
        opening_stock=opening,
        current_stock=opening,
        unit_cost=_non_negative(unit_cost, "unit_cost"),
        reorder_level=(_non_negative(reorder_level, "reorder_level")
                       if reorder_level is not None else None),
    )
    log_action(
        action="create",
        instance=item,
        user=user,
        changes={"opening_stock": opening},
    )
    logger.info("Created item %s (%s) for company %s", item.item_code, name, company.pk)
    return item


@atomic_unit
def deactivate_inventory_item(company, item_code, *, user=None):
    """Soft delete; the movement history stays attached."""
    item = lock_active(InventoryItem, company, item_code=item_code)
    item.is_active = False
    item.save(update_fields=["is_active", "updated_at"])
    log_action(action="deactivate", instance=item, user=user)
    return item


# ----------------------------
# Stock movements
# ----------------------------
@atomic_unit
def record_stock_movement(company, item_code, movement_type, quantity, *,
                          user=None, to_location=None, unit_cost=None,
                          reference="", notes=""):
    """
    Append one StockMovement and move the item's current_stock with it.

    TRANSFER re-homes the item to ``to_location`` without changing the
    quantity; no per-location balances are kept.
    """
    if movement_type not in STOCK_MOVEMENT_TYPES:
        raise InvalidInputError(
            f"Unknown movement type {movement_type!r}.",
            field="movement_type", value=movement_type)

    quantity = require_positive(quantity, "quantity")

    destination = None
    if movement_type == "TRANSFER":
        if to_location is None:
            raise InvalidInputError(
                "to_location is required for a transfer.", field="to_location")
        destination = resolve_active(Location, company, to_location, "to_location")

    if unit_cost is not None:
        unit_cost = _non_negative(unit_cost, "unit_cost")

    # Row lock: concurrent movements on this item queue here
    item = lock_active(InventoryItem, company, item_code=item_code)

    if destination is not None and destination.pk == item.location_id:
        raise InvalidInputError(
            f"{item.item_code} is already at {destination}.",
            field="to_location", value=destination.pk)

    previous = item.current_stock
    new = next_stock_level(movement_type, previous, quantity)

    movement = StockMovement.objects.create(
        company=company,
        movement_code=next_code(company, "MOV"),
        item=item,
        movement_type=movement_type,
        quantity=quantity,
        previous_stock=previous,
        new_stock=new,
        from_location=item.location if movement_type in ("ISSUE", "TRANSFER") else None,
        to_location=(destination if destination is not None
                     else item.location if movement_type in STOCK_IN_TYPES else None),
        unit_cost=unit_cost,
        reference=reference or "",
        notes=notes or "",
        recorded_by=user,
    )

    # Balance write after the movement insert, same atomic unit
    item.current_stock = new
    update_fields = ["current_stock", "updated_at"]
    if destination is not None:
        item.location = destination
        update_fields.append("location")
    item.save(update_fields=update_fields)

    log_action(
        action="record_movement",
        instance=movement,
        user=user,
        changes={
            "item": item.item_code,
            "movement_type": movement_type,
            "quantity": quantity,
            "previous_stock": previous,
            "new_stock": new,
        },
    )
    logger.info(
        "%s %s %s on %s: %s -> %s",
        movement.movement_code, movement_type, quantity, item.item_code, previous, new,
    )
    return movement
