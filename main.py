"""
Store Builder API
=================
Ponto de entrada para rodar com `python main.py`
"""

import uvicorn

from storebuilder.core.config import config
from storebuilder.main import app

if __name__ == "__main__":
    uvicorn.run(
        "storebuilder.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.is_development,
        log_level=config.LOG_LEVEL.lower(),
    )

__all__ = ["app"]
