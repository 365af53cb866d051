"""Read access to servers, shared networks and subnets."""
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Connection, RowMapping

from kea_config.models.dhcp4 import AuditRevision, ParameterBlock, Server, SharedNetwork, Subnet
from kea_config.models.tables import (
    PARAM_COLUMNS,
    dhcp4_audit_revision,
    dhcp4_server,
    dhcp4_shared_network,
    dhcp4_shared_network_server,
    dhcp4_subnet,
    dhcp4_subnet_server,
    metadata,
)
from kea_config.services.store import Store, connect


def params_from_row(row: RowMapping) -> ParameterBlock:
    """Build a ParameterBlock from a network or subnet row."""
    values = {name: row[name] for name in PARAM_COLUMNS}
    return ParameterBlock(modified_at=row["modification_ts"], **values)


def params_to_row(params: ParameterBlock) -> dict:
    """Column values for a ParameterBlock; unset values stay NULL."""
    row = {name: getattr(params, name) for name in PARAM_COLUMNS}
    row["modification_ts"] = params.modified_at
    return row


def _row_to_server(row: RowMapping) -> Server:
    return Server(
        id=row["id"],
        tag=row["tag"],
        description=row["description"] or "",
        modified_at=row["modification_ts"],
    )


def _load_servers(conn: Connection, join_table, key_column: str, key) -> List[Server]:
    """Servers associated with one scope through its join table."""
    query = (
        select(dhcp4_server)
        .join(join_table, join_table.c.server_id == dhcp4_server.c.id)
        .where(join_table.c[key_column] == key)
        .order_by(dhcp4_server.c.tag)
    )
    return [_row_to_server(row) for row in conn.execute(query).mappings()]


def find_server(store: Store, tag: str) -> Optional[Server]:
    """Get server by tag.

    Returns:
        Server, or None when no row matches or the matched row is empty
    """
    with connect(store) as conn:
        row = conn.execute(
            select(dhcp4_server).where(dhcp4_server.c.tag == tag)
        ).mappings().first()

    if row is None or not row["tag"]:
        return None
    return _row_to_server(row)


def find_shared_network(store: Store, name: str) -> Optional[SharedNetwork]:
    """Get shared network by name, with its associated servers."""
    with connect(store) as conn:
        row = conn.execute(
            select(dhcp4_shared_network).where(dhcp4_shared_network.c.name == name)
        ).mappings().first()

        if row is None or not row["name"]:
            return None

        servers = _load_servers(
            conn, dhcp4_shared_network_server, "shared_network_id", row["id"]
        )

    return SharedNetwork(
        id=row["id"],
        name=row["name"],
        params=params_from_row(row),
        servers=servers,
    )


def find_subnet(store: Store, prefix: str) -> Optional[Subnet]:
    """Get subnet by prefix, with its associated servers."""
    with connect(store) as conn:
        row = conn.execute(
            select(dhcp4_subnet).where(dhcp4_subnet.c.subnet_prefix == prefix)
        ).mappings().first()

        if row is None or not row["subnet_prefix"]:
            return None

        servers = _load_servers(
            conn, dhcp4_subnet_server, "subnet_id", row["subnet_id"]
        )

    return Subnet(
        id=row["subnet_id"],
        prefix=row["subnet_prefix"],
        v4o6_interface=row["4o6_interface"],
        v4o6_interface_id=row["4o6_interface_id"],
        v4o6_subnet=row["4o6_subnet"],
        shared_network_name=row["shared_network_name"],
        params=params_from_row(row),
        servers=servers,
    )


def server_exists(store: Store, tag: str) -> bool:
    """Check if server exists."""
    return find_server(store, tag) is not None


def shared_network_exists(store: Store, name: str) -> bool:
    """Check if shared network exists."""
    with connect(store) as conn:
        found = conn.execute(
            select(dhcp4_shared_network.c.id).where(dhcp4_shared_network.c.name == name)
        ).first()
    return found is not None


def subnet_exists(store: Store, prefix: str) -> bool:
    """Check if subnet exists."""
    with connect(store) as conn:
        found = conn.execute(
            select(dhcp4_subnet.c.subnet_id).where(dhcp4_subnet.c.subnet_prefix == prefix)
        ).first()
    return found is not None


def count_rows(store: Store, table_name: str) -> int:
    """Number of rows in one of the configuration tables."""
    table = metadata.tables[table_name]
    with connect(store) as conn:
        return conn.execute(select(func.count()).select_from(table)).scalar_one()


def list_audit_revisions(
    store: Store, limit: int = 100, server_tag: Optional[str] = None
) -> List[AuditRevision]:
    """Audit trail, newest first.

    Args:
        store: Engine or open connection
        limit: Maximum number of revisions to return
        server_tag: Only revisions recorded for this server
    """
    query = select(dhcp4_audit_revision).order_by(dhcp4_audit_revision.c.id.desc()).limit(limit)
    if server_tag is not None:
        query = query.where(dhcp4_audit_revision.c.server_tag == server_tag)

    with connect(store) as conn:
        rows = conn.execute(query).mappings().all()

    return [
        AuditRevision(
            id=row["id"],
            modified_at=row["modification_ts"],
            server_tag=row["server_tag"],
            log_message=row["log_message"] or "",
            affects_config=row["affects_config"],
        )
        for row in rows
    ]
