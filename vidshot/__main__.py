"""Run the vidshot API server."""
from __future__ import annotations

import uvicorn

from vidshot.infrastructure.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "vidshot.adapters.inbound.fastapi_app:app",
        host=settings.web.host,
        port=settings.web.port,
    )


if __name__ == "__main__":
    main()
