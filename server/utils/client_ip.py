"""Client IP detection

Priority order:
1. CF-Connecting-IP: requests proxied through Cloudflare
2. X-Forwarded-For: first hop behind a reverse proxy
3. request.client.host: direct connection
"""

import hashlib

from fastapi import Request


def get_client_ip(request: Request) -> str:
    """Best-effort originating address; informational only, never trusted for auth"""
    cf_ip = request.headers.get("CF-Connecting-IP")
    if cf_ip:
        return cf_ip.strip()

    xff = request.headers.get("X-Forwarded-For", "")
    if xff:
        first = xff.split(",")[0].strip()
        if first:
            return first

    return request.client.host if request.client else "unknown"


def hash_client_ip(client_ip: str) -> str:
    """Short stable hash used as the rate limit key and in request logs"""
    return hashlib.sha256(client_ip.encode()).hexdigest()[:16]
