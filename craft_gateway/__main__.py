"""Run the gateway with uvicorn: ``python -m craft_gateway``."""

import uvicorn

from craft_gateway.core.config import settings


def main() -> None:
    uvicorn.run("craft_gateway.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
