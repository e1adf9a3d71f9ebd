from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .errors import MaximusError
from .settings import settings
from .sessions import get_registry
from .constants import APP_NAME
from .routers import learn
from .routers import arithmetic
from .routers import reading
from .routers import typing_drill
from .routers import draw
from .routers import coding
from .routers import kindness

logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
	registry = app.dependency_overrides.get(get_registry, get_registry)()
	# Abandoned sessions (reloads, closed tabs) are reclaimed in the background
	registry.start_sweeper()
	yield
	await registry.stop_sweeper()
	# Stop every module timer and in-flight oracle call before the loop goes away
	await registry.close_all()


app = FastAPI(title=f"{APP_NAME} Learning API", lifespan=lifespan)
app.include_router(learn.router)
app.include_router(arithmetic.router)
app.include_router(reading.router)
app.include_router(typing_drill.router)
app.include_router(draw.router)
app.include_router(coding.router)
app.include_router(kindness.router)


@app.exception_handler(MaximusError)
async def maximus_error_handler(request: Request, exc: MaximusError):
	if exc.status_code >= 500:
		logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
	return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/info")
def root():
	return {"status": "ok", "app": APP_NAME, "gemini_configured": bool(settings.gemini_api_key)}


if __name__ == "__main__":
	import uvicorn

	uvicorn.run(app, host="0.0.0.0", port=8000, log_level=settings.log_level.lower())
