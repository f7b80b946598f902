"""Run the API server.

Usage:
    python -m hn_stories
"""

import uvicorn

from hn_stories.config.settings import settings

if __name__ == "__main__":
    uvicorn.run(
        "hn_stories.api.app:app",
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.server.log_level.lower(),
    )
