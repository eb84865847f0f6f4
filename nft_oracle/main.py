from fastapi import FastAPI

from nft_oracle.core.config import get_settings
from nft_oracle.core.logging import configure_logging
from nft_oracle.core.middleware import RequestIdMiddleware
from nft_oracle.api.v1.router import v1_router


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
    )

    # Middleware: Request ID
    app.add_middleware(RequestIdMiddleware, header_name=settings.request_id_header)

    # API v1
    app.include_router(v1_router, prefix=settings.api_prefix)

    return app


app = create_app()
