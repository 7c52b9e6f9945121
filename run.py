#!/usr/bin/env python3
"""
Run script for the School Administration API
"""
import uvicorn

from school_admin.config.settings import settings
from school_admin.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
