"""SQLAlchemy tables for the Kea DHCPv4 configuration backend schema"""
from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    SmallInteger,
    String,
    Table,
    Text,
)

metadata = MetaData()


def _param_columns():
    """Columns of the parameter block embedded in networks and subnets."""
    return [
        Column("boot_file_name", String(128)),
        Column("next_server", BigInteger),
        Column("server_hostname", String(64)),
        Column("client_class", String(128)),
        Column("interface", String(128)),
        Column("match_client_id", Boolean),
        Column("relay", Text),
        Column("require_client_classes", Text),
        Column("reservation_mode", SmallInteger),
        Column("authoritative", Boolean),
        Column("valid_lifetime", Integer),
        Column("rebind_timer", Integer),
        Column("renew_timer", Integer),
        Column("calculate_tee_times", Boolean),
        Column("t1_percent", Float),
        Column("t2_percent", Float),
        Column("min_valid_lifetime", Integer),
        Column("max_valid_lifetime", Integer),
        Column("ddns_send_updates", Boolean),
        Column("ddns_override_no_update", Boolean),
        Column("ddns_override_client_update", Boolean),
        Column("ddns_replace_client_name", SmallInteger),
        Column("ddns_generated_prefix", String(255)),
        Column("ddns_qualifying_suffix", String(255)),
        Column("user_context", Text),
        Column("modification_ts", DateTime, nullable=False),
    ]


PARAM_COLUMNS = [c.name for c in _param_columns() if c.name != "modification_ts"]


dhcp4_server = Table(
    "dhcp4_server",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tag", String(256), unique=True, nullable=False),
    Column("description", Text),
    Column("modification_ts", DateTime, nullable=False),
)

dhcp4_shared_network = Table(
    "dhcp4_shared_network",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(128), unique=True, nullable=False),
    *_param_columns(),
)

dhcp4_shared_network_server = Table(
    "dhcp4_shared_network_server",
    metadata,
    Column(
        "shared_network_id",
        Integer,
        ForeignKey("dhcp4_shared_network.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "server_id",
        Integer,
        ForeignKey("dhcp4_server.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("modification_ts", DateTime),
)

# subnet_id is assigned by the writer, never by the store
dhcp4_subnet = Table(
    "dhcp4_subnet",
    metadata,
    Column("subnet_id", Integer, primary_key=True, autoincrement=False),
    Column("subnet_prefix", String(64), unique=True, nullable=False),
    Column("4o6_interface", String(128)),
    Column("4o6_interface_id", String(128)),
    Column("4o6_subnet", String(64)),
    Column(
        "shared_network_name",
        String(128),
        ForeignKey("dhcp4_shared_network.name", ondelete="SET NULL"),
    ),
    *_param_columns(),
)

dhcp4_subnet_server = Table(
    "dhcp4_subnet_server",
    metadata,
    Column(
        "subnet_id",
        Integer,
        ForeignKey("dhcp4_subnet.subnet_id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "server_id",
        Integer,
        ForeignKey("dhcp4_server.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("modification_ts", DateTime),
)

dhcp4_audit_revision = Table(
    "dhcp4_audit_revision",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("modification_ts", DateTime, nullable=False),
    Column("server_tag", String(256), nullable=False),
    Column("log_message", Text),
    Column("affects_config", Boolean, nullable=False, default=True),
)
