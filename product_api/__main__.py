import uvicorn
from product_api.core.config import get_settings


def run():
    settings = get_settings()
    uvicorn.run(
        "product_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_config=None,  # keep the colorlog handler installed by configure_logging
    )


if __name__ == "__main__":
    run()
