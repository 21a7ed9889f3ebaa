"""
Default function library available to templates.

Names follow the interpolation functions WireGuard config templates
commonly rely on. A renderer can be built with any other mapping.
"""

import base64
import hashlib
import ipaddress
from typing import Any, Callable, Dict, List


def upper(value: str) -> str:
    return value.upper()


def lower(value: str) -> str:
    return value.lower()


def title(value: str) -> str:
    return value.title()


def trimspace(value: str) -> str:
    return value.strip()


def join(separator: str, values: List[str]) -> str:
    return separator.join(str(v) for v in values)


def split(separator: str, value: str) -> List[str]:
    return value.split(separator)


def replace(value: str, old: str, new: str) -> str:
    return value.replace(old, new)


def format(spec: str, *args: Any) -> str:
    """printf-style formatting, e.g. ``format("%s:%d", host, port)``."""
    return spec % args


def base64encode(value: str) -> str:
    return base64.b64encode(value.encode('utf-8')).decode('ascii')


def base64decode(value: str) -> str:
    return base64.b64decode(value, validate=True).decode('utf-8')


def sha256(value: str) -> str:
    return hashlib.sha256(value.encode('utf-8')).hexdigest()


def cidrhost(prefix: str, hostnum: int) -> str:
    """
    Address of host number ``hostnum`` within ``prefix``.

    Negative numbers count back from the end of the range.
    """
    network = ipaddress.ip_network(prefix, strict=False)
    hostnum = int(hostnum)
    if hostnum < 0:
        hostnum += network.num_addresses
    if not 0 <= hostnum < network.num_addresses:
        raise ValueError(f"prefix {prefix} has no host number {hostnum}")
    return str(network.network_address + hostnum)


def cidrnetmask(prefix: str) -> str:
    network = ipaddress.ip_network(prefix, strict=False)
    if network.version != 4:
        raise ValueError(f"only IPv4 prefixes have a netmask, got {prefix}")
    return str(network.netmask)


def default_functions() -> Dict[str, Callable[..., Any]]:
    """Return a fresh copy of the default function library."""
    return {
        'upper': upper,
        'lower': lower,
        'title': title,
        'trimspace': trimspace,
        'join': join,
        'split': split,
        'replace': replace,
        'format': format,
        'base64encode': base64encode,
        'base64decode': base64decode,
        'sha256': sha256,
        'cidrhost': cidrhost,
        'cidrnetmask': cidrnetmask,
    }
