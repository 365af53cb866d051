"""DHCPv4 configuration API endpoints"""
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.engine import Engine

from kea_config.models.dhcp4 import (
    AuditRevision,
    Server,
    ServerCreate,
    SharedNetwork,
    SharedNetworkCreate,
    Subnet,
    SubnetCreate,
)
from kea_config.services import repository, writer
from kea_config.services.errors import (
    DuplicateEntity,
    KeaConfigError,
    NotFound,
    StorageUnavailable,
)
from kea_config.services.store import get_store

router = APIRouter(prefix="/api/dhcp4", tags=["dhcp4"])


def to_http_error(e: KeaConfigError) -> HTTPException:
    """Map a configuration error to an HTTP error."""
    if isinstance(e, NotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, DuplicateEntity):
        return HTTPException(status_code=409, detail=f"Already exists: {e}")
    if isinstance(e, StorageUnavailable):
        return HTTPException(status_code=503, detail=f"Storage unavailable: {e}")
    return HTTPException(status_code=500, detail=f"Transaction failed: {e}")


def require_server(store: Engine, tag: str) -> Server:
    server = repository.find_server(store, tag)
    if server is None:
        raise NotFound("server", tag)
    return server


def require_shared_network(store: Engine, name: str) -> SharedNetwork:
    network = repository.find_shared_network(store, name)
    if network is None:
        raise NotFound("shared network", name)
    return network


@router.get("/servers/{tag}", response_model=Server)
def get_server(tag: str, store: Engine = Depends(get_store)):
    """Get server by tag."""
    try:
        return require_server(store, tag)
    except KeaConfigError as e:
        raise to_http_error(e)


@router.post("/servers", response_model=Server, status_code=201)
def create_server(body: ServerCreate, store: Engine = Depends(get_store)):
    """Register a server tag."""
    try:
        return writer.create_server(store, Server(tag=body.tag, description=body.description))
    except KeaConfigError as e:
        raise to_http_error(e)


@router.get("/shared-networks/{name}", response_model=SharedNetwork)
def get_shared_network(name: str, store: Engine = Depends(get_store)):
    """Get shared network by name."""
    try:
        return require_shared_network(store, name)
    except KeaConfigError as e:
        raise to_http_error(e)


@router.post("/shared-networks", response_model=SharedNetwork, status_code=201)
def create_shared_network(body: SharedNetworkCreate, store: Engine = Depends(get_store)):
    """Create a shared network on behalf of a server."""
    try:
        server = require_server(store, body.server_tag)
        network = SharedNetwork(name=body.name, params=body.params)
        return writer.create_shared_network(store, server, network)
    except KeaConfigError as e:
        raise to_http_error(e)


@router.get("/subnets/{prefix:path}", response_model=Subnet)
def get_subnet(prefix: str, store: Engine = Depends(get_store)):
    """Get subnet by prefix, e.g. /api/dhcp4/subnets/192.168.101.0/24."""
    try:
        subnet = repository.find_subnet(store, prefix)
    except KeaConfigError as e:
        raise to_http_error(e)
    if subnet is None:
        raise HTTPException(status_code=404, detail=f"subnet not found: {prefix}")
    return subnet


@router.post("/subnets", response_model=Subnet, status_code=201)
def create_subnet(body: SubnetCreate, store: Engine = Depends(get_store)):
    """Create a subnet inside an existing shared network."""
    try:
        server = require_server(store, body.server_tag)
        network = require_shared_network(store, body.shared_network_name)
        subnet = Subnet(
            prefix=body.prefix,
            v4o6_interface=body.v4o6_interface,
            v4o6_interface_id=body.v4o6_interface_id,
            v4o6_subnet=body.v4o6_subnet,
            params=body.params,
        )
        return writer.create_subnet(store, server, network, subnet)
    except KeaConfigError as e:
        raise to_http_error(e)


@router.get("/audit-revisions", response_model=List[AuditRevision])
def get_audit_revisions(
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of revisions"),
    server_tag: Optional[str] = Query(None, description="Server tag filter"),
    store: Engine = Depends(get_store),
):
    """Get the audit trail, newest first."""
    try:
        return repository.list_audit_revisions(store, limit=limit, server_tag=server_tag)
    except KeaConfigError as e:
        raise to_http_error(e)
