import os

import uvicorn

from entity_encoder.config import HOST, PORT, LOG_LEVEL


if __name__ == "__main__":
    use_reload = os.environ.get("EE_NO_RELOAD", "").lower() not in ("1", "true", "yes")
    uvicorn.run(
        "entity_encoder.main:app",
        host=HOST,
        port=PORT,
        reload=use_reload,
        log_level=LOG_LEVEL,
    )
