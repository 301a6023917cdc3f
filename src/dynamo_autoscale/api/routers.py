from fastapi import FastAPI

from dynamo_autoscale.health.api import router as health_router


def configure_routers(app: FastAPI) -> FastAPI:
    app.include_router(health_router)
    return app
