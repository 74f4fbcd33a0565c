from typing import Any, Dict, Iterable, List, Mapping, Optional

INVENTORY_FIELD = "quantity_on_hand"


def project(
    records: Iterable[Mapping[str, Any]],
    show_inventory: Optional[bool] = None,
    field: Optional[str] = INVENTORY_FIELD,
) -> List[Dict[str, Any]]:
    """
    Clear the optional inventory field on each record of a page.

    Only an explicit False hides the field. Records are copied so the
    store's own data is never touched.
    """
    if show_inventory is not False or field is None:
        return [dict(record) for record in records]
    return [{**record, field: None} for record in records]
