from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from admin_console.config import get_settings
from admin_console.routes import (
    attendance,
    behaviour,
    bulk_import,
    classes,
    consequences,
    dashboard,
    detentions,
    incident_types,
    interventions,
    merit_types,
    merits,
    parents,
    reports,
    students,
    teachers,
    timetables,
    users,
)
from admin_console.services.school_api import SchoolApiError

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    redirect_slashes=False,
    title="School Admin Console",
    description="Admin console API over the school management backend",
    version="1.0.0",
    openapi_tags=[
        {
            "name": "Bulk Import",
            "description": "Spreadsheet imports of students, teachers and classes",
        },
        {
            "name": "Reports",
            "description": "Excel and CSV report downloads",
        },
    ],
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SchoolApiError)
async def school_api_error_handler(request: Request, exc: SchoolApiError):
    logger.error(f"{request.method} {request.url.path} -> school API error {exc.status_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "details": exc.details},
    )


@app.get("/health")
def health():
    return {"status": "ok"}


# Include routers
app.include_router(dashboard.router, prefix="/dashboard")
app.include_router(students.router, prefix="/students")
app.include_router(teachers.router, prefix="/teachers")
app.include_router(parents.router, prefix="/parents")
app.include_router(classes.router, prefix="/classes")
app.include_router(attendance.router, prefix="/attendance")
app.include_router(behaviour.router, prefix="/behaviour")
app.include_router(merits.router, prefix="/merits")
app.include_router(detentions.router, prefix="/detentions")
app.include_router(timetables.router, prefix="/timetables")
app.include_router(users.router, prefix="/users")
app.include_router(incident_types.router, prefix="/incident-types")
app.include_router(merit_types.router, prefix="/merit-types")
app.include_router(interventions.router, prefix="/interventions")
app.include_router(consequences.router, prefix="/consequences")
app.include_router(bulk_import.router, prefix="/bulk-import", tags=["Bulk Import"])
app.include_router(reports.router, prefix="/reports", tags=["Reports"])
