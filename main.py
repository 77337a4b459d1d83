from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from faceyoga.core.config import settings
from faceyoga.core.logging import configure_logging
from faceyoga.endpoints import access, admin, catalog, feedback, goals, history, payments, profile, progress_photos, webhooks
from faceyoga.middleware.exceptions import (
    database_exception_handler,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from faceyoga.middleware.logging import RequestLoggingMiddleware
from faceyoga.core.scheduler import start_scheduler, stop_scheduler

configure_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(SQLAlchemyError, database_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

app.include_router(catalog.router, tags=["Catalog"])
app.include_router(history.router, tags=["Practice History"])
app.include_router(access.router, prefix="/access", tags=["Access"])
app.include_router(payments.router, prefix="/payments", tags=["Payments"])
app.include_router(goals.router, prefix="/goals", tags=["Goals"])
app.include_router(profile.router, prefix="/profile", tags=["Profile"])
app.include_router(progress_photos.router, prefix="/progress-photos", tags=["Progress Photos"])
app.include_router(feedback.router, prefix="/feedback", tags=["Feedback"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
app.include_router(webhooks.router, tags=["Webhooks"])

@app.get("/health", tags=["utility"])
async def health():
    return {"status": "ok"}

@app.on_event("startup")
async def startup_event():
    start_scheduler()

@app.on_event("shutdown")
async def shutdown_event():
    stop_scheduler()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
