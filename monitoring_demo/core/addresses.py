"""
Address normalisation

Deployments hand over addresses in the shapes the platform's service
bindings use: scheme-less URLs, Go-style MySQL DSNs, comma-separated
Cassandra hosts with a keyspace suffix. These helpers turn them into what
the Python clients accept.
"""
import re
from typing import List, Optional, Tuple

# user:pass@tcp(host:port)/dbname?params
GO_MYSQL_DSN = re.compile(
    r"^(?P<auth>[^@/]*@)?tcp\((?P<addr>[^)]*)\)(?P<path>/[^?]*)?(?:\?.*)?$"
)

DEFAULT_MEMCACHE_PORT = 11211
DEFAULT_CASSANDRA_PORT = 9042


def with_scheme(url: str, scheme: str) -> str:
    """Prefix `scheme://` unless the url already carries a scheme"""
    if "://" in url:
        return url
    return f"{scheme}://{url}"


def mysql_url(url: str) -> str:
    """
    SQLAlchemy URL for MySQL using the PyMySQL driver

    Examples:
        >>> mysql_url("u:p@tcp(db:3306)/demo?parseTime=true")
        'mysql+pymysql://u:p@db:3306/demo'
        >>> mysql_url("mysql://u:p@db/demo")
        'mysql+pymysql://u:p@db/demo'
    """
    match = GO_MYSQL_DSN.match(url)
    if match:
        auth = match.group("auth") or ""
        path = match.group("path") or "/"
        return f"mysql+pymysql://{auth}{match.group('addr')}{path}"

    if url.startswith("mysql://"):
        return "mysql+pymysql://" + url[len("mysql://"):]

    return with_scheme(url, "mysql+pymysql")


def postgres_url(url: str) -> str:
    """SQLAlchemy URL for PostgreSQL using psycopg2"""
    # SQLAlchemy no longer accepts the short postgres:// scheme
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg2://" + url[len(prefix):]

    return with_scheme(url, "postgresql+psycopg2")


def _split_port(address: str, default: int) -> Tuple[str, int]:
    """
    Split ``host[:port]``

    Raises: ValueError if the port is not a number in 1..65535
    """
    host, sep, port = address.rpartition(":")
    if not sep:
        return address, default

    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ValueError(f"invalid port {port!r} in {address!r}")
    return host, int(port)


def memcache_address(addr: str) -> Tuple[str, int]:
    """Parse ``host[:port]``"""
    return _split_port(addr.strip(), DEFAULT_MEMCACHE_PORT)


def cassandra_address(url: str) -> Tuple[List[str], int, Optional[str]]:
    """
    Parse ``host1,host2[:port][/keyspace]``

    Returns:
        (hosts, port, keyspace) where keyspace is None when absent.
        The driver takes a single port, so the last one given wins.

    Raises: ValueError for a bad port or an empty host list
    """
    hosts_part, _, keyspace = url.partition("/")

    hosts = []
    port = DEFAULT_CASSANDRA_PORT
    for entry in hosts_part.split(","):
        entry = entry.strip()
        if not entry:
            continue
        host, port = _split_port(entry, port)
        hosts.append(host)

    if not hosts:
        raise ValueError(f"no hosts in {url!r}")

    return hosts, port, keyspace or None
