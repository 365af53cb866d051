"""DHCPv4 configuration models"""
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field, field_validator

from kea_config.services.ip_convert import ip_to_int


class Server(BaseModel):
    """Kea server identity. Referenced by scopes, never owned by them."""
    id: Optional[int] = None
    tag: str
    description: str = ""
    modified_at: Optional[datetime] = None


class ParameterBlock(BaseModel):
    """DHCP tuning values shared by shared networks and subnets.

    Every value left as None is inherited from a higher configuration
    scope by the DHCP server. Only ``modified_at`` is mandatory; the
    writer stamps it when the scope is created.
    """
    boot_file_name: Optional[str] = None
    next_server: Optional[int] = None  # uint32, network byte order
    server_hostname: Optional[str] = None
    client_class: Optional[str] = None
    interface: Optional[str] = None
    match_client_id: Optional[bool] = None
    relay: Optional[str] = None
    require_client_classes: Optional[str] = None
    reservation_mode: Optional[int] = None
    authoritative: Optional[bool] = None
    valid_lifetime: Optional[int] = None
    rebind_timer: Optional[int] = None
    renew_timer: Optional[int] = None
    calculate_tee_times: Optional[bool] = None
    t1_percent: Optional[float] = None
    t2_percent: Optional[float] = None
    min_valid_lifetime: Optional[int] = None
    max_valid_lifetime: Optional[int] = None
    ddns_send_updates: Optional[bool] = None
    ddns_override_no_update: Optional[bool] = None
    ddns_override_client_update: Optional[bool] = None
    ddns_replace_client_name: Optional[int] = None
    ddns_generated_prefix: Optional[str] = None
    ddns_qualifying_suffix: Optional[str] = None
    user_context: Optional[str] = None
    modified_at: datetime = Field(default_factory=datetime.now)

    @field_validator("next_server", mode="before")
    @classmethod
    def parse_next_server(cls, value):
        # Accept dotted-quad from API clients
        if isinstance(value, str):
            return ip_to_int(value)
        return value


def attach_server(servers: Optional[List[Server]], server: Server) -> List[Server]:
    """Return the association set with ``server`` in it, keyed by tag."""
    servers = list(servers or [])
    if all(s.tag != server.tag for s in servers):
        servers.append(server)
    return servers


class SharedNetwork(BaseModel):
    """Named group of subnets sharing one broadcast domain."""
    id: Optional[int] = None
    name: str
    params: ParameterBlock = Field(default_factory=ParameterBlock)
    servers: List[Server] = Field(default_factory=list)


class Subnet(BaseModel):
    """DHCPv4 subnet scope."""
    id: Optional[int] = None
    prefix: str  # "192.168.101.0/24"
    v4o6_interface: Optional[str] = None
    v4o6_interface_id: Optional[str] = None
    v4o6_subnet: Optional[str] = None
    shared_network_name: Optional[str] = None
    params: ParameterBlock = Field(default_factory=ParameterBlock)
    servers: List[Server] = Field(default_factory=list)


class AuditRevision(BaseModel):
    """Append-only audit trail entry."""
    id: Optional[int] = None
    modified_at: datetime
    server_tag: str
    log_message: str
    affects_config: bool = True


class ServerCreate(BaseModel):
    """Model for seeding a server."""
    tag: str
    description: str = ""


class SharedNetworkCreate(BaseModel):
    """Model for creating a shared network on behalf of a server."""
    server_tag: str
    name: str
    params: ParameterBlock = Field(default_factory=ParameterBlock)


class SubnetCreate(BaseModel):
    """Model for creating a subnet inside a shared network."""
    server_tag: str
    shared_network_name: str
    prefix: str
    v4o6_interface: Optional[str] = None
    v4o6_interface_id: Optional[str] = None
    v4o6_subnet: Optional[str] = None
    params: ParameterBlock = Field(default_factory=ParameterBlock)
