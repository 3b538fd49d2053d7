"""Owner identity for incoming requests.

Authentication itself happens upstream: the auth proxy validates the session
and forwards the resolved owner id in a trusted header. Requests must not
reach this service without passing through that proxy.
"""

from typing import Optional

from fastapi import Request

from shortlinks.common.headers import get_header


def get_owner_id(request: Request) -> Optional[str]:
    """Owner id from the configured auth header, or None without a session."""
    config = request.app.state.config
    return get_header(dict(request.headers), config.auth_header)
