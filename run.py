#!/usr/bin/env python3
"""
Run script for the SignWeave translation backend
"""
import uvicorn

from signweave.config.settings import settings
from signweave.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
