import logging
import os
from typing import Any, Dict, Optional

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .clients import create_openai_client
from .controller import ScanController
from .diagnosis import DiagnosisClient
from .errors import ConfigurationError, ScanInProgressError
from .insights import InsightsClient
from .models import Tab
from .speech import SpeechPlayer

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger("leafdoctor.api")


# =========================
# Helpers
# =========================
def _validate_image(upload: UploadFile, data: bytes) -> None:
    if upload.content_type not in config.ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail="file_error")
    if not data:
        raise HTTPException(status_code=400, detail="empty_file")
    if len(data) > config.MAX_IMAGE_BYTES:
        raise HTTPException(status_code=413, detail="too_large")


def build_controller() -> ScanController:
    client = create_openai_client()
    return ScanController(
        diagnosis=DiagnosisClient(client),
        speech=SpeechPlayer(client),
        insights=InsightsClient(client),
    )


def _controller(request: Request) -> ScanController:
    # built on first use so the app can be imported without credentials
    if request.app.state.controller is None:
        request.app.state.controller = build_controller()
    return request.app.state.controller


# =========================
# FastAPI app
# =========================
def create_app(controller: Optional[ScanController] = None) -> FastAPI:
    app = FastAPI(title=config.APP_NAME)
    app.state.controller = controller

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root():
        return {
            "status": "ok",
            "service": config.APP_NAME,
            "model": config.MODEL_NAME,
            "tts_model": config.TTS_MODEL_NAME,
        }

    @app.get("/view")
    async def view(request: Request) -> Dict[str, Any]:
        return _controller(request).view()

    @app.post("/scan")
    async def scan(request: Request, image: UploadFile = File(...)) -> Dict[str, Any]:
        ctrl = _controller(request)
        if not ctrl.capture_enabled:
            raise HTTPException(status_code=409, detail="scan_in_progress")

        data = await image.read()
        _validate_image(image, data)

        try:
            return await ctrl.capture(data, mime_type=image.content_type)
        except ScanInProgressError:
            raise HTTPException(status_code=409, detail="scan_in_progress")

    @app.post("/scan/clear")
    async def clear_scan(request: Request) -> Dict[str, Any]:
        return _controller(request).clear()

    @app.post("/history/{entry_id}/select")
    async def select_history(request: Request, entry_id: str) -> Dict[str, Any]:
        try:
            return _controller(request).select_history(entry_id)
        except KeyError:
            raise HTTPException(status_code=404, detail="history_entry_not_found")

    @app.post("/tabs/{tab}")
    async def switch_tab(request: Request, tab: Tab) -> Dict[str, Any]:
        return _controller(request).switch_tab(tab)

    @app.post("/language")
    async def set_language(request: Request, lang: str = Form(...)) -> Dict[str, Any]:
        try:
            return _controller(request).set_language(lang)
        except ConfigurationError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.post("/speak")
    async def speak(request: Request) -> Dict[str, Any]:
        # async so the playback task lands on the server's event loop
        return _controller(request).speak_current()

    @app.post("/insights")
    async def insights(request: Request, location: str = Form(...)) -> Dict[str, Any]:
        return await _controller(request).load_insights(location)

    @app.post("/notifications/dismiss")
    async def dismiss_notifications(request: Request) -> Dict[str, Any]:
        return _controller(request).dismiss_notifications()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("leafdoctor.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
