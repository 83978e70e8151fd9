# run_dev.py
"""
Local development launcher for FastAPI.
Equivalent to: `uvicorn lexrelay.app:app --reload --host 0.0.0.0 --port 3000`
"""

import uvicorn

from lexrelay.settings import settings

if __name__ == "__main__":
    uvicorn.run(
        "lexrelay.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
