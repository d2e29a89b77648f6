from starlette.requests import Request


# Checked in order; proxies and CDNs each use their own header
CLIENT_IP_HEADERS = (
    "x-real-ip",
    "x-forwarded-for",
    "cf-connecting-ip",
    "true-client-ip",
)


def _normalize_ip(ip: str) -> str:
    ip = ip.strip()
    if ip.startswith("::ffff:"):
        ip = ip[len("::ffff:"):]
    return ip


def get_client_ip(request: Request) -> str:
    """Best-effort caller address behind reverse proxies"""
    for header in CLIENT_IP_HEADERS:
        value = request.headers.get(header)
        if value:
            # x-forwarded-for is "client, proxy1, proxy2"
            first = value.split(",")[0]
            if first.strip():
                return _normalize_ip(first)

    if request.client and request.client.host:
        return _normalize_ip(request.client.host)
    return "unknown"


def get_user_agent(request: Request) -> str:
    return request.headers.get("user-agent", "Unknown User-Agent")
