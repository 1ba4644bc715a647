import logging
import socket
from typing import Optional

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

logger = logging.getLogger(__name__)

_LOCAL_HOSTS = {"localhost", "127.0.0.1", "::1"}
_DEFAULT_PG_DATABASE = "postgres"


def _is_local_host(host: Optional[str]) -> bool:
    if not host:
        return True
    return host in _LOCAL_HOSTS or host.startswith("/")


def resolve_ipv4(hostname: str) -> Optional[str]:
    try:
        infos = socket.getaddrinfo(hostname, None, socket.AF_INET, socket.SOCK_STREAM)
    except (socket.gaierror, OSError) as exc:
        logger.warning("IPv4 lookup for %s failed: %s", hostname, exc)
        return None
    for _family, _type, _proto, _canonname, sockaddr in infos:
        if sockaddr and sockaddr[0]:
            return sockaddr[0]
    return None


def normalize_database_url(raw_url: str, *, force_ipv4: bool = False) -> URL:
    value = (raw_url or "").strip()
    if not value:
        raise ValueError("DATABASE_URL is empty")
    if value.startswith("postgres://"):
        value = "postgresql://" + value[len("postgres://"):]

    url = make_url(value)
    if url.get_backend_name() != "postgresql":
        return url

    if not url.database:
        url = url.set(database=_DEFAULT_PG_DATABASE)

    query = dict(url.query)
    if "sslmode" not in query and not _is_local_host(url.host):
        query["sslmode"] = "require"

    if force_ipv4 and url.host and "hostaddr" not in query:
        logger.info("Resolving database host %s to IPv4", url.host)
        ipv4 = resolve_ipv4(url.host)
        if ipv4:
            logger.info("Database host %s resolved to %s", url.host, ipv4)
            # libpq connects to hostaddr and keeps host for TLS verification
            query["hostaddr"] = ipv4

    return url.set(query=query)


def mask_database_url(url) -> str:
    if isinstance(url, str):
        try:
            url = make_url(url)
        except ArgumentError:
            return "***MASKED***"
    return url.render_as_string(hide_password=True)


__all__ = ["mask_database_url", "normalize_database_url", "resolve_ipv4"]
