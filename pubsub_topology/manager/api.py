"""
FastAPI application for the Pub/Sub topology service.

This module defines the REST API endpoints for publishing messages and
activating subscription consumers. The topology document is reconciled once
when the application starts.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pubsub_topology import __version__
from pubsub_topology.common.exceptions import ActivationError, PublishError, ValidationError
from pubsub_topology.manager.models import PublishRequest, SubscribeRequest
from pubsub_topology.manager.service import PubSubService

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

service: Optional[PubSubService] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown."""
    global service

    # Startup
    logger.info("Starting Pub/Sub topology service")

    if service is None:
        service = PubSubService()
    await service.initialize()

    yield

    # Shutdown
    logger.info("Shutting down Pub/Sub topology service")
    if service:
        await service.close()


# Create FastAPI application
app = FastAPI(
    title="Pub/Sub Topology Service",
    description="Provisions a Pub/Sub topology from configuration and relays published messages",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=".*",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content = {"error": error}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies in the same shape as other errors."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    logger.warning(f"Rejected request body for {request.method} {request.url.path}: {details}")
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body", details)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception in {request.method} {request.url}: {exc}", exc_info=True)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", str(exc))


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "service": "Pub/Sub Topology Service",
        "version": __version__,
        "endpoints": ["/health", "/publish", "/subscribe"],
        "docs": "/docs",
    }


@app.post(
    "/publish",
    summary="Publish a message",
    description="Wrap the message in an envelope and publish it, creating the topic if needed",
)
async def publish(request: Optional[PublishRequest] = None):
    """Publish a message to a topic."""
    request = request or PublishRequest()
    try:
        receipt = await service.publish(request.topic_name, request.message)
    except ValidationError as e:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(e))
    except PublishError as e:
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e.message, e.details)

    return {"messageId": receipt.message_id, "topic": receipt.topic}


@app.post(
    "/subscribe",
    summary="Activate a subscription consumer",
    description="Ensure the topic and subscription exist and attach a consumer that acknowledges every message",
)
async def subscribe(request: Optional[SubscribeRequest] = None):
    """Subscribe to a topic."""
    request = request or SubscribeRequest()
    try:
        handle = await service.subscribe(request.topic_name, request.subscription_name)
    except ActivationError as e:
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e.message, e.details)

    return {"status": "subscribed", "topic": handle.topic, "subscription": handle.subscription}


if __name__ == "__main__":
    import uvicorn

    from pubsub_topology.manager.config import ServiceConfig

    config = ServiceConfig()
    # Run the application
    uvicorn.run("pubsub_topology.manager.api:app", host=config.host, port=config.port, log_level="info")
