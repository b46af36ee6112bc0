"""
Flask demo serving a JNLP descriptor behind the ticket middleware.

Usage:
    # Install dependencies
    pip install -e ".[flask]"

    # Run the server
    flask --app examples.flask_demo run --port 8010

    # Or directly
    python examples/flask_demo.py

Test with curl:
    curl -H "Cookie: CF_Authorization=demo" -H "CF-Connecting-IP: 9.9.9.9" \
        http://localhost:8010/launch.jnlp

Environment variables:
    HMAC_SECRET - Ticket signing key (default: "default-secret")
    DEBUG - Set to "true" to trace intermediate values
"""

import logging

from flask import Flask, Response, jsonify

# Import from installed package
from jnlp_ticket_filter import FilterConfig
from jnlp_ticket_filter.middleware import JnlpTicketWSGIMiddleware

# Configuration from environment
CONFIG = FilterConfig.from_env()

logging.basicConfig(level=logging.DEBUG if CONFIG.debug else logging.INFO)

JNLP_DOCUMENT = """<?xml version="1.0" encoding="utf-8"?>
<jnlp spec="1.0+" codebase="https://apps.example.com/">
  <application-desc main-class="com.example.Console">
    <param name="http_ticket" value="SESSION-TICKET"/>
  </application-desc>
</jnlp>
"""

app = Flask(__name__)

# Wrap with ticket middleware
app.wsgi_app = JnlpTicketWSGIMiddleware(app.wsgi_app, config=CONFIG)


@app.route("/launch.jnlp")
def launch():
    """JNLP descriptor with an http_ticket param."""
    return Response(JNLP_DOCUMENT, mimetype="application/x-java-jnlp-file")


@app.route("/health")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=8010, debug=CONFIG.debug)
