"""
Ownership scoping for catalog rows (components and maintenance types).

A catalog row is visible to a user when it is global or when that user owns it.
`is_visible` is the one definition of that rule. It is written with column
operators only, so the same function serves both enforcement points:

    is_visible(row, user_id)                 -> bool, for a loaded row
    is_visible(ComponentCatalog, user_id)    -> SQL clause, for a query filter

    db.query(ComponentCatalog).filter(is_visible(ComponentCatalog, user_id))
"""

from maintrack.models.owner_scope import OwnerScope


def is_visible(entry, requesting_user_id):
    """True iff `entry` is global or owned by `requesting_user_id`."""
    return (entry.ownerScope == OwnerScope.GLOBAL) | (entry.ownerUserId == requesting_user_id)


def filter_visible(entries, requesting_user_id) -> list:
    """Keep only the rows `requesting_user_id` may see, preserving order."""
    return [e for e in entries if is_visible(e, requesting_user_id)]
