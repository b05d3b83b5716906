"""Run the API with uvicorn: python -m tiendasapp"""

import uvicorn

from tiendasapp.config import settings


def main() -> None:
    uvicorn.run(
        "tiendasapp.main:app",
        host=settings.backend_host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
