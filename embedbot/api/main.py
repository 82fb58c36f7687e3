import logging

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from embedbot import __version__
from embedbot.config import get_settings
from embedbot.errors import ChatbotError, InvalidRequest
from embedbot.utils.logging import configure_logging
from .routers import bots, chat

settings = get_settings()
configure_logging(settings.log_level)

# The widget is embedded on arbitrary customer sites, so every origin is allowed.
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}

app = FastAPI(
    title="Embeddable Chatbot Backend",
    description="Chat turn handling for website widgets, grounded on per-bot knowledge.",
    version=__version__,
)


@app.middleware("http")
async def cors_headers(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(ChatbotError)
async def chatbot_error_handler(request: Request, exc: ChatbotError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies are reported like missing fields; the widget only shows the error string.
    logging.info(f"Rejected malformed request to {request.url.path}")
    return JSONResponse(status_code=InvalidRequest.status_code, content={"error": InvalidRequest.default_message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logging.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": ChatbotError.default_message}, headers=CORS_HEADERS)


app.include_router(chat.router)
app.include_router(bots.router)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
