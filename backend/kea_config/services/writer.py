"""Transactional creation of servers, shared networks and subnets.

Every operation runs in a single transaction: the audit revision, the
scope row and its server associations are committed together or not at
all. Records passed in are not modified; the stored version is returned.
"""
from datetime import datetime
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine

from kea_config.logger import get_logger, log_operation
from kea_config.models.dhcp4 import Server, SharedNetwork, Subnet, attach_server
from kea_config.models.tables import (
    dhcp4_server,
    dhcp4_shared_network,
    dhcp4_shared_network_server,
    dhcp4_subnet,
    dhcp4_subnet_server,
)
from kea_config.services import audit
from kea_config.services.errors import KeaConfigError, NotFound
from kea_config.services.repository import params_to_row, shared_network_exists
from kea_config.services.store import transaction
from kea_config.services.subnet_ids import next_subnet_id

logger = get_logger("services.writer")


def _server_id(conn: Connection, server: Server) -> int:
    """Store id of a server, checked against the store inside the transaction.

    A record carrying an id must match both id and tag; one without an
    id is resolved by tag.
    """
    query = select(dhcp4_server.c.id).where(dhcp4_server.c.tag == server.tag)
    if server.id is not None:
        query = query.where(dhcp4_server.c.id == server.id)
    server_id = conn.execute(query).scalar()
    if server_id is None:
        raise NotFound("server", server.tag)
    return server_id


def _associate(conn: Connection, join_table, key_column: str, key, servers: Iterable[Server], now: datetime):
    rows = [
        {key_column: key, "server_id": _server_id(conn, s), "modification_ts": now}
        for s in servers
    ]
    if rows:
        conn.execute(join_table.insert(), rows)


def create_server(engine: Engine, server: Server) -> Server:
    """Register a server tag.

    Raises:
        DuplicateEntity: tag already registered
    """
    server = server.model_copy(deep=True)
    server.modified_at = datetime.now()
    try:
        with transaction(engine) as conn:
            audit.record(conn, server.tag, f"add new server: {server.tag}")
            result = conn.execute(
                dhcp4_server.insert().values(
                    tag=server.tag,
                    description=server.description,
                    modification_ts=server.modified_at,
                )
            )
            server.id = result.inserted_primary_key[0]
    except KeaConfigError as e:
        log_operation(server.tag, "ROLLBACK", f"server {server.tag}", str(e), level="ERROR")
        raise

    log_operation(server.tag, "CREATE", f"server {server.tag}")
    return server


def create_shared_network(engine: Engine, server: Server, network: SharedNetwork) -> SharedNetwork:
    """Create a shared network served by ``server``.

    Raises:
        DuplicateEntity: name already taken
        StorageUnavailable: store unreachable
        TransactionFailed: any other store error
    """
    network = network.model_copy(deep=True)
    obj = f"shared-network {network.name}"
    try:
        with transaction(engine) as conn:
            audit.record(conn, server.tag, f"add new shared network: {network.name}")

            network.servers = attach_server(network.servers, server)
            now = datetime.now()
            network.params.modified_at = now

            result = conn.execute(
                dhcp4_shared_network.insert().values(
                    name=network.name,
                    **params_to_row(network.params),
                )
            )
            network.id = result.inserted_primary_key[0]

            _associate(
                conn, dhcp4_shared_network_server, "shared_network_id",
                network.id, network.servers, now,
            )
    except KeaConfigError as e:
        log_operation(server.tag, "ROLLBACK", obj, str(e), level="ERROR")
        raise

    logger.debug("Shared network %s created with id %s", network.name, network.id)
    log_operation(server.tag, "CREATE", obj)
    return network


def create_subnet(engine: Engine, server: Server, shared_network: SharedNetwork, subnet: Subnet) -> Subnet:
    """Create a subnet in ``shared_network`` served by ``server``.

    The subnet id is allocated inside the same transaction as the
    insert and the audit revision.

    Raises:
        NotFound: shared network is not in the store
        DuplicateEntity: prefix or allocated id already taken
        StorageUnavailable: store unreachable
        TransactionFailed: any other store error
    """
    subnet = subnet.model_copy(deep=True)
    obj = f"subnet {subnet.prefix}"
    try:
        with transaction(engine) as conn:
            audit.record(conn, server.tag, f"add new subnet: {subnet.prefix}")

            if not shared_network_exists(conn, shared_network.name):
                raise NotFound("shared network", shared_network.name)
            subnet.shared_network_name = shared_network.name
            subnet.servers = attach_server(subnet.servers, server)

            subnet.id = next_subnet_id(conn)
            now = datetime.now()
            subnet.params.modified_at = now

            conn.execute(
                dhcp4_subnet.insert().values(
                    {
                        "subnet_id": subnet.id,
                        "subnet_prefix": subnet.prefix,
                        "4o6_interface": subnet.v4o6_interface,
                        "4o6_interface_id": subnet.v4o6_interface_id,
                        "4o6_subnet": subnet.v4o6_subnet,
                        "shared_network_name": subnet.shared_network_name,
                        **params_to_row(subnet.params),
                    }
                )
            )

            _associate(
                conn, dhcp4_subnet_server, "subnet_id",
                subnet.id, subnet.servers, now,
            )
    except KeaConfigError as e:
        log_operation(server.tag, "ROLLBACK", obj, str(e), level="ERROR")
        raise

    logger.debug("Subnet %s created with id %s", subnet.prefix, subnet.id)
    log_operation(server.tag, "CREATE", obj)
    return subnet
