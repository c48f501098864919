"""
RESTful API routes

Notification list, read state, banner, escalation, vitals ingress and the
assistant endpoints.
"""

import asyncio
import time
import uuid

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from vitalguard.capture.samples import HeartRateSample
from vitalguard.core.pipeline import AssistantUnavailableError, MonitoringPipeline

router = APIRouter(prefix="/api", tags=["API"])

_start_time = time.time()


class ManualVitalsRequest(BaseModel):
    systolic: str | None = None
    diastolic: str | None = None
    glucose: str | None = None


class ChatRequest(BaseModel):
    text: str


class HeartRateRequest(BaseModel):
    bpm: float


def get_pipeline(request: Request) -> MonitoringPipeline:
    return request.app.state.pipeline


def _parse_id(notification_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(notification_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="Notification not found")


@router.get("/status")
async def get_status(request: Request) -> dict:
    pipeline = get_pipeline(request)
    return {
        "status": "running",
        "uptime_seconds": round(time.time() - _start_time, 2),
        "version": "0.1.0",
        "monitoring": pipeline.is_monitoring,
        "unread_count": pipeline.unread_count,
        "vitals": pipeline.snapshot.to_dict(),
    }


@router.get("/notifications")
async def get_notifications(request: Request) -> dict:
    pipeline = get_pipeline(request)
    notifications = pipeline.notifications
    return {
        "total": len(notifications),
        "unread_count": pipeline.unread_count,
        "notifications": [n.to_dict() for n in notifications],
    }


@router.post("/notifications/read-all")
async def mark_all_read(request: Request) -> dict:
    pipeline = get_pipeline(request)
    pipeline.mark_all_read()
    return {"success": True, "unread_count": pipeline.unread_count}


@router.post("/notifications/{notification_id}/read")
async def mark_read(notification_id: str, request: Request) -> dict:
    pipeline = get_pipeline(request)
    if not pipeline.mark_read(_parse_id(notification_id)):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True, "unread_count": pipeline.unread_count}


@router.delete("/notifications")
async def clear_all(request: Request) -> dict:
    pipeline = get_pipeline(request)
    pipeline.clear_all()
    return {"success": True}


@router.get("/banner")
async def get_banner(request: Request) -> dict:
    banner = get_pipeline(request).banner()
    return {"banner": banner.to_dict() if banner else None}


@router.post("/escalation/acknowledge")
async def acknowledge_escalation(request: Request) -> dict:
    notification = get_pipeline(request).acknowledge_escalation()
    return {"acknowledged": notification.to_dict() if notification else None}


@router.post("/vitals/manual")
async def submit_manual_vitals(body: ManualVitalsRequest, request: Request) -> dict:
    sent = get_pipeline(request).submit_manual_vitals(
        systolic=body.systolic,
        diastolic=body.diastolic,
        glucose=body.glucose,
    )
    return {"notifications": [n.to_dict() for n in sent]}


@router.post("/vitals/heart-rate")
async def submit_heart_rate(body: HeartRateRequest, request: Request) -> dict:
    sample = HeartRateSample(timestamp=time.time(), bpm=body.bpm)
    notification = get_pipeline(request).process_heart_rate(sample)
    return {"notification": notification.to_dict() if notification else None}


@router.post("/risk")
async def assess_risk(request: Request) -> dict:
    try:
        future = get_pipeline(request).assess_risk()
    except AssistantUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    assessment = await asyncio.wrap_future(future)
    return assessment.to_dict()


@router.post("/assistant/chat")
def chat(body: ChatRequest, request: Request) -> dict:
    try:
        reply = get_pipeline(request).chat(body.text)
    except AssistantUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if reply is None:
        raise HTTPException(status_code=400, detail="Message is empty")
    return {"reply": reply}


__all__ = ["router"]
