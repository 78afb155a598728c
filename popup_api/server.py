"""Process entry point: ``python -m popup_api.server`` or the ``popup-server`` script."""
from __future__ import annotations

import uvicorn

from popup_api.app import create_app
from popup_api.core.config import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings)
    # uvicorn traps SIGINT/SIGTERM; the lifespan hook logs the shutdown
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
