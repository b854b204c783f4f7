import logging

from fastapi import FastAPI

from app.api.flows import router as flows_router
from app.core.config import settings

# extra= fields rendered after the message; plaintext and key material never go here
CONTEXT_FIELDS = ("action", "screen", "status", "slot_count", "event_id", "reason")


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = [
            f"{key}={getattr(record, key)}"
            for key in CONTEXT_FIELDS
            if getattr(record, key, None) not in (None, "")
        ]
        return f"{base} | {' '.join(context)}" if context else base


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="WhatsApp Flow Booking Endpoint", version="1.0.0")

app.include_router(flows_router, tags=["flows"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
