import os

from authcode_server.main import app
from authcode_server.core.config import PORT

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "authcode_server.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=os.getenv("API_RELOAD", "false").lower() == "true",
        log_level="info"
    )
