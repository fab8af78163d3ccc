import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from leadintel.database import init_db
from leadintel.exceptions import IntelligenceError, LeadNotFoundError, LLMError
from leadintel.web.routes.intelligence import router as intelligence_router
from leadintel.web.routes.messages import router as messages_router
from leadintel.web.routes.predictive import router as predictive_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Lead Intent Scoring & Outreach Synthesis")

app.include_router(intelligence_router, prefix="/intelligence")
app.include_router(predictive_router, prefix="/predictive")
app.include_router(messages_router, prefix="/messages")


@app.exception_handler(LeadNotFoundError)
async def lead_not_found(request: Request, exc: LeadNotFoundError):
    return JSONResponse({"error": str(exc)}, status_code=404)


@app.exception_handler(IntelligenceError)
async def intelligence_failed(request: Request, exc: IntelligenceError):
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    status_code = 502 if isinstance(exc, LLMError) else 500
    return JSONResponse({"error": f"{exc}. Please try again."}, status_code=status_code)


@app.on_event("startup")
def on_startup():
    init_db()
