"""Audit trail for configuration changes."""
from datetime import datetime

from sqlalchemy import text
from sqlalchemy.engine import Connection

from kea_config.models.tables import dhcp4_audit_revision

CREATE_AUDIT_REVISION = text(
    "CALL createAuditRevisionDHCP4(:audit_ts, :server_tag, :audit_log_message, :cascade_transaction)"
)


def record(conn: Connection, server_tag: str, message: str) -> Connection:
    """Append an audit revision inside the caller's open transaction.

    The revision always affects configuration. Errors are not caught:
    an audit row that cannot be written fails the whole transaction.

    Args:
        conn: Connection with an open transaction
        server_tag: Tag of the server the change is made for
        message: Human readable description of the change

    Returns:
        The same connection, so further writes chain into it
    """
    now = datetime.now()

    if conn.dialect.name == "mysql":
        # The Kea schema keeps revision state in session variables set by the procedure
        conn.execute(
            CREATE_AUDIT_REVISION,
            {
                "audit_ts": now,
                "server_tag": server_tag,
                "audit_log_message": message,
                "cascade_transaction": True,
            },
        )
    else:
        conn.execute(
            dhcp4_audit_revision.insert().values(
                modification_ts=now,
                server_tag=server_tag,
                log_message=message,
                affects_config=True,
            )
        )

    return conn
