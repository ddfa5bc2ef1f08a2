"""
Run the API server: python -m resim
"""

import uvicorn

from resim.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "resim.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
