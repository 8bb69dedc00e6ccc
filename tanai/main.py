from datetime import time, timedelta
import logging

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from tanai.advisory import best_time_of_day, describe_risk, evaluate
from tanai.config import Settings, get_settings
from tanai.schemas import (
    BestTimeRequest,
    BestTimeResponse,
    EvaluateRequest,
    EvaluateResponse,
    PlanRequest,
    PlanResponse,
    ShadeInfo,
    SkinShade,
)
from tanai.services.advisor import AdvisorService
from tanai.shades import shade_catalogue, target_choices

settings = get_settings()

# Set up logging
logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(title="TanAI Advisor")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_advisor_service() -> AdvisorService:
    return AdvisorService(get_settings())


@app.get("/")
async def health_check():
    return {"status": "healthy", "service": "TanAI Advisor"}


@app.get("/shades", response_model=list[ShadeInfo])
async def list_shades():
    return shade_catalogue()


@app.get("/shades/{shade}/targets", response_model=list[SkinShade])
async def list_target_shades(shade: SkinShade):
    """Target shades offered after the user picks their current shade."""
    return target_choices(shade)


@app.post("/advisory/evaluate", response_model=EvaluateResponse)
async def evaluate_reading(request: EvaluateRequest):
    advisory = evaluate(request.shade, request.sample)
    return EvaluateResponse(advisory=advisory, risk_message=describe_risk(advisory.risk_label))


@app.post("/advisory/best-time", response_model=BestTimeResponse)
async def best_time(request: BestTimeRequest, config: Settings = Depends(get_settings)):
    best = best_time_of_day(
        request.shade,
        request.samples,
        timedelta(seconds=request.utc_offset_seconds),
        start=time(config.daylight_start_hour),
        end=time(config.daylight_end_hour),
    )
    if best is None:
        return BestTimeResponse()
    return BestTimeResponse(best=best, advisory=evaluate(request.shade, best))


@app.post("/plan", response_model=PlanResponse)
async def create_plan(
    request: PlanRequest,
    advisor: AdvisorService = Depends(get_advisor_service),
):
    try:
        return await advisor.create_plan(
            request.profile,
            request.latitude,
            request.longitude,
            with_narrative=request.include_narrative,
        )
    except Exception as e:
        logger.error(f"Error creating plan: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create tanning plan")
