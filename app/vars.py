import os

SERVICE_NAME = os.getenv("SERVICE_NAME", "http-relay")
HOST = os.environ.get("HOSTNAME", "")
PORT = os.environ.get("PORT", "")

# Upstream hosts with self-signed or invalid certificates are only reachable
# when this is switched on explicitly.
RELAY_ALLOW_UNSAFE_CERT = (
    os.getenv("RELAY_ALLOW_UNSAFE_CERT", "false").lower() == "true"
)
RELAY_TIMEOUT = float(os.getenv("RELAY_TIMEOUT", "30"))
RELAY_MAX_REDIRECTS = int(os.getenv("RELAY_MAX_REDIRECTS", "10"))

CORS_ALLOW_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
]

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
OTLP_HEADERS = os.getenv("OTLP_HEADERS", "")
