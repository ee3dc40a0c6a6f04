#!/usr/bin/env python
"""Serve the bundle admin pages; PORT comes from the environment, log level from settings."""
import os
import uvicorn

from app.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    port = int(os.environ.get("PORT", 8000))

    print(f"Starting Smart Bundle Creator on port {port} ({settings.ENVIRONMENT})")

    # Behind the hosting proxy the admin is reached over https
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=port,
        log_level=settings.LOG_LEVEL.lower(),
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
