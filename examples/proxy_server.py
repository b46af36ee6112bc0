"""
JNLP ticket reverse proxy (Starlette + uvicorn)

Sits in front of an origin that serves JNLP launch descriptors. Requests must
carry the session cookie set by the identity-aware proxy in front of this one;
JNLP responses get a signed ticket and the session credential appended to
their http_ticket param, everything else passes through.

Usage:
    pip install -e ".[server]"
    ORIGIN_URL=http://localhost:8080 HMAC_SECRET=change-me python examples/proxy_server.py

Environment variables:
    ORIGIN_URL - Upstream origin base URL (required)
    HMAC_SECRET - Ticket signing key (default: "default-secret")
    SESSION_COOKIE - Session cookie name (default: CF_Authorization)
    ORIGIN_TIMEOUT - Origin request timeout in seconds (default: 10)
    DEBUG - Set to "true" to trace intermediate values
    PORT - Override port (default: 8787)
"""

import logging
import os

from jnlp_ticket_filter import FilterConfig, create_app

# Configuration from environment
CONFIG = FilterConfig.from_env()
PORT = int(os.getenv("PORT", "8787"))

logging.basicConfig(
    level=logging.DEBUG if CONFIG.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

app = create_app(CONFIG)


if __name__ == "__main__":
    import uvicorn

    print("")
    print("JNLP ticket proxy")
    print(f"   Running on http://localhost:{PORT}")
    print(f"   Origin: {CONFIG.origin_url}")
    print(f"   Session cookie: {CONFIG.session_cookie}")
    if CONFIG.secret_is_default:
        print("   WARNING: HMAC_SECRET not set, using the default secret")
    print("")

    uvicorn.run(app, host="0.0.0.0", port=PORT)
