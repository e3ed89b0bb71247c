"""
Run the Recordbook API with uvicorn.

    python -m recordbook
    recordbook            # console script installed by pip

Host and port come from settings (HOST / PORT, default 0.0.0.0:3000).
"""

import uvicorn

from recordbook.config import settings


def main() -> None:
    uvicorn.run(
        "recordbook.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
