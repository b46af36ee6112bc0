"""
FastAPI demo serving a JNLP descriptor behind the ticket middleware.

Usage:
    # Install dependencies
    pip install -e ".[fastapi]"

    # Run the server
    uvicorn examples.fastapi_demo:app --port 8009 --reload

    # Or directly
    python examples/fastapi_demo.py

Test with curl:
    # Plain endpoint (passes through unchanged)
    curl -H "Cookie: CF_Authorization=demo" http://localhost:8009/

    # JNLP endpoint (http_ticket value gets the signed ticket appended)
    curl -H "Cookie: CF_Authorization=demo" -H "X-Forwarded-For: 9.9.9.9" \
        http://localhost:8009/launch.jnlp

    # No session cookie -> 401
    curl -i http://localhost:8009/launch.jnlp

Environment variables:
    HMAC_SECRET - Ticket signing key (default: "default-secret")
    DEBUG - Set to "true" to trace intermediate values
"""

import logging

from fastapi import FastAPI
from fastapi.responses import Response

# Import from installed package
from jnlp_ticket_filter import FilterConfig, JnlpTicketASGIMiddleware

# Configuration from environment
CONFIG = FilterConfig.from_env()

logging.basicConfig(level=logging.DEBUG if CONFIG.debug else logging.INFO)

JNLP_DOCUMENT = """<?xml version="1.0" encoding="utf-8"?>
<jnlp spec="1.0+" codebase="https://apps.example.com/">
  <information><title>Demo Console</title></information>
  <application-desc main-class="com.example.Console">
    <param name="host" value="apps.example.com"/>
    <param name="http_ticket" value="SESSION-TICKET"/>
  </application-desc>
</jnlp>
"""

app = FastAPI(
    title="JNLP Ticket Demo API",
    description="Demo API with JNLP ticket injection",
    version="0.1.0",
)

# Add ticket middleware
app.add_middleware(JnlpTicketASGIMiddleware, config=CONFIG)


@app.get("/")
async def root():
    """API info endpoint."""
    return {
        "service": "JNLP Ticket Demo API",
        "session_cookie": CONFIG.session_cookie,
        "endpoints": {
            "/launch.jnlp": "JNLP descriptor, rewritten with a signed ticket",
            "/health": "Health check",
        },
    }


@app.get("/launch.jnlp")
async def launch():
    """JNLP descriptor with an http_ticket param."""
    return Response(content=JNLP_DOCUMENT, media_type="application/x-java-jnlp-file")


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8009)
