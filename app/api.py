from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

from app.routes import account, admin, alerts, auth, cron, jobs, public
from core.database import init_db

# Ensure .env values are loaded even if uvicorn is launched without `dotenv run`.
load_dotenv(override=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(lifespan=lifespan)


app.include_router(public.router)
app.include_router(jobs.router)
app.include_router(auth.router)
app.include_router(account.router)
app.include_router(alerts.router)
app.include_router(admin.router)
app.include_router(cron.router)


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(
        {"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
        status_code=400,
    )


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    response.headers.setdefault(
        "Content-Security-Policy",
        "default-src 'self'; img-src 'self' data:; style-src 'self' 'unsafe-inline'; script-src 'self' 'unsafe-inline'; "
        "font-src 'self' data:; connect-src 'self';",
    )
    return response
