"""Run the relay with uvicorn: ``python -m persona_relay``."""

import uvicorn

from persona_relay.configs.config import get_app_config


def main() -> None:
    config = get_app_config()
    uvicorn.run(
        "persona_relay.app:app",
        host=config.api.host,
        port=config.api.port,
        log_config=None,  # setup_logging owns the handlers
    )


if __name__ == "__main__":
    main()
