"""Print the IPv4 addresses a host name resolves to."""

from __future__ import annotations

import socket
import sys
from dataclasses import dataclass


@dataclass(frozen=True)
class HostEntry:
    """One resolved address of a host."""

    canonname: str | None
    address: str


def lookup(hostname: str) -> list[HostEntry]:
    """Resolve ``hostname`` to its IPv4 stream-socket addresses, in resolver order."""
    entries = []
    for _family, _type, _proto, canonname, sockaddr in socket.getaddrinfo(
        hostname, None, socket.AF_INET, socket.SOCK_STREAM
    ):
        host, _serv = socket.getnameinfo(
            sockaddr, socket.NI_NUMERICHOST | socket.NI_NUMERICSERV
        )
        entries.append(HostEntry(canonname or None, host))
    return entries


def main(argv: list[str] | None = None) -> int:
    """Command entry point: ``hostinfo <hostname>``."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("format ./myhostinfo www.website.com", file=sys.stderr)
        return 0
    try:
        entries = lookup(args[0])
    except socket.gaierror as exc:
        print(f"Getaddrinfo error: {exc.strerror or exc}", file=sys.stderr)
        return 0
    for entry in entries:
        canon = entry.canonname if entry.canonname is not None else "(null)"
        print(f"canonname: {canon}, hostname: {entry.address}")
    return 0