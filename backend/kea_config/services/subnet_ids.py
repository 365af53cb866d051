"""Sequential subnet id allocation."""
from sqlalchemy import select
from sqlalchemy.engine import Connection

from kea_config.models.tables import dhcp4_subnet

FIRST_SUBNET_ID = 1


def next_subnet_id(conn: Connection) -> int:
    """Next free subnet id: highest existing id + 1, or 1 for an empty table.

    Must run in the same transaction as the insert that uses the id.
    The read locks the highest row (and the gap above it on InnoDB) so
    concurrent writers serialize; where the store ignores FOR UPDATE the
    primary key on subnet_id rejects the loser with DuplicateEntity.
    """
    query = (
        select(dhcp4_subnet.c.subnet_id)
        .order_by(dhcp4_subnet.c.subnet_id.desc())
        .limit(1)
        .with_for_update()
    )
    last_id = conn.execute(query).scalar()
    if last_id is None:
        return FIRST_SUBNET_ID
    return last_id + 1
