from typing import Any, Iterable, List, Optional, Tuple


def validate_port(value: Any) -> Optional[int]:
    """Return ``value`` as a port number, or None if it is not a valid port."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            return None
        value = int(value)
    if not isinstance(value, int):
        return None
    if 1 <= value <= 65535:
        return value
    return None


def parse_ports(values: Iterable[Any]) -> Tuple[int, ...]:
    """Validate every entry, keeping order and dropping duplicates.

    Raises ValueError naming the first invalid entry.
    """
    ports: List[int] = []
    for raw in values:
        port = validate_port(raw)
        if port is None:
            raise ValueError(f"Invalid port: {raw!r}")
        if port not in ports:
            ports.append(port)
    return tuple(ports)


def exposed_port_numbers(exposed: Any) -> List[int]:
    """Turn Docker's ``{"80/tcp": {}}`` ExposedPorts shape into port numbers."""
    if not isinstance(exposed, dict):
        return []
    ports = []
    for key in exposed:
        port = validate_port(str(key).split("/")[0])
        if port is not None:
            ports.append(port)
    return sorted(ports)
