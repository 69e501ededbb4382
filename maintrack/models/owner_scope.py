import enum
from sqlalchemy import Enum


class OwnerScope(str, enum.Enum):
    GLOBAL = "global"   # seeded, shared by every user
    USER   = "user"     # created ad hoc, visible to its owner only


# Stored by value ("global" / "user"), not by member name
OwnerScopeType = Enum(
    OwnerScope,
    name="owner_scope",
    values_callable=lambda members: [m.value for m in members],
)

# global rows have no owner, user rows always have one
SCOPE_OWNER_CHECK = (
    "(\"ownerScope\" = 'global' AND \"ownerUserId\" IS NULL) OR "
    "(\"ownerScope\" = 'user' AND \"ownerUserId\" IS NOT NULL)"
)
