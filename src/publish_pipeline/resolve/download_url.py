from __future__ import annotations

import socket
from typing import Optional

DEFAULT_PORT = 7888


def local_ipv4() -> Optional[str]:
    """First IPv4 address the local host name resolves to."""
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError:
        return None
    for _family, _type, _proto, _canon, sockaddr in infos:
        if sockaddr and sockaddr[0]:
            return str(sockaddr[0])
    return None


def resolve_download_url(override: Optional[str] = None, port: int = DEFAULT_PORT) -> str:
    if override:
        return override
    ip = local_ipv4() or "127.0.0.1"
    return f"http://{ip}:{port}/"
