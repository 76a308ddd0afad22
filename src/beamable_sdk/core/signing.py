"""Request signing for server-mode calls.

The API authenticates server-to-server requests by recomputing::

    base64(md5(secret + pid + version + path_and_query + body))

MD5 is what the backend expects; it is a compatibility requirement, not a
choice. The body is the exact JSON string sent on the wire and is left out
for ``DELETE`` requests even when one is sent.
"""

from __future__ import annotations

import base64
import hashlib

SIGNATURE_VERSION = "1"


def calculate_signature(
    secret: str,
    pid: str,
    path_and_query: str,
    body: str | None = None,
    method: str = "GET",
    version: str = SIGNATURE_VERSION,
) -> str:
    """Return the ``X-BEAM-SIGNATURE`` value for a request.

    Args:
        secret: Realm secret.
        pid: Project id.
        path_and_query: Request path including any query string, e.g.
            ``/basic/accounts/search?query=&page=0``.
        body: Serialized JSON body, or None when no body is sent.
        method: HTTP method. ``DELETE`` bodies are never signed.
        version: Signature protocol version.
    """
    data_to_sign = f"{secret}{pid}{version}{path_and_query}"
    if body is not None and method.upper() != "DELETE":
        data_to_sign += body
    digest = hashlib.md5(data_to_sign.encode("utf-8"), usedforsecurity=False).digest()
    return base64.b64encode(digest).decode("ascii")
