"""
FastAPI demo with API gateway verification.

Usage:
    # Install dependencies
    pip install -e ".[fastapi]"

    # Run the server
    GATEWAY_PUBLIC_KEY_ENDPOINT=http://localhost:8080/public-key \
        uvicorn examples.fastapi_demo:app --port 8009 --reload

Test with curl:
    # Health endpoint (exempt from verification)
    curl http://localhost:8009/health

    # Any other endpoint must be reached through the gateway, otherwise 400
    curl -i http://localhost:8009/orders

Environment variables:
    GATEWAY_PUBLIC_KEY_ENDPOINT - URL serving the gateway's PEM public key
    GATEWAY_PUBLIC_KEY_FILE - Path to a PEM public key (instead of the endpoint)
    GATEWAY_SIGNED_HEADERS - Comma separated headers covered by the request hash
    GATEWAY_SKIP_VERIFICATION - Set to "true" to skip verification (local use only)
"""

import logging
import os

from fastapi import FastAPI, Request

from gateway_verifier import GatewayVerificationASGIMiddleware, VerifierConfig, Whitelist

logging.basicConfig(level=logging.INFO)

# Configuration from environment
PUBLIC_KEY_ENDPOINT = os.getenv("GATEWAY_PUBLIC_KEY_ENDPOINT")
PUBLIC_KEY_FILE = os.getenv("GATEWAY_PUBLIC_KEY_FILE")
SIGNED_HEADERS = [h.strip() for h in os.getenv("GATEWAY_SIGNED_HEADERS", "").split(",") if h.strip()]
SKIP_VERIFICATION = os.getenv("GATEWAY_SKIP_VERIFICATION", "false").lower() == "true"

public_key = None
if PUBLIC_KEY_FILE:
    with open(PUBLIC_KEY_FILE) as f:
        public_key = f.read()

config = VerifierConfig(
    public_key=public_key,
    public_key_endpoint=None if public_key else PUBLIC_KEY_ENDPOINT,
    header_policy=Whitelist(tuple(SIGNED_HEADERS)),
    bypass=SKIP_VERIFICATION,
    disclose_bypass=SKIP_VERIFICATION,
)

app = FastAPI(
    title="Gateway Verification Demo API",
    description="Demo API that only accepts requests signed by the API gateway",
    version="0.1.0",
)

app.add_middleware(
    GatewayVerificationASGIMiddleware,
    config=config,
    exempt_paths=["/health"],
)


@app.get("/orders")
async def orders(request: Request):
    """Only reachable when the gateway signature checks out."""
    gateway = request.state.gateway
    return {
        "orders": [],
        "bypassed": gateway.bypassed,
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8009)
