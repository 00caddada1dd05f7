"""
URL helpers shared by the configuration accessors.
"""


def build_full_url(host: str, port: int) -> str:
    """
    Join a base URL and a port.

    Args:
        host: Base URL such as ``http://127.0.0.1``.
        port: Port to append. ``0`` means the port is omitted.

    Returns:
        The base URL with ``:port`` appended, or the base URL unchanged
        when no port is given.
    """
    if not port or port < 0:
        return host
    return f"{host.rstrip('/')}:{port}"
