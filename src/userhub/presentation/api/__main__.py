"""Run the API with uvicorn: ``python -m userhub.presentation.api``."""

import uvicorn

from userhub_config.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "userhub.presentation.api.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # logging is configured by create_app
    )


if __name__ == "__main__":
    main()
