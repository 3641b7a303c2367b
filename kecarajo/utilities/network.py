"""Network helpers used when starting the KeCarajoComer server."""
import socket


def get_local_ip() -> str:
    """Best-effort LAN address of this host, '127.0.0.1' when none is routable.

    Connecting a UDP socket only makes the OS pick the outgoing interface;
    nothing is sent.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.connect(("8.8.8.8", 80))
        return str(sock.getsockname()[0])
    except OSError:
        return "127.0.0.1"
    finally:
        sock.close()


def server_urls(host: str, port: int) -> list[str]:
    """URLs to print at startup: localhost first, then the LAN address if any."""
    urls = [f"http://localhost:{port}"]
    if host in ("0.0.0.0", ""):
        local_ip = get_local_ip()
        if local_ip not in ("127.0.0.1", "localhost"):
            urls.append(f"http://{local_ip}:{port}")
    return urls
