import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from . import config
from .diagnosis import DiagnosisClient
from .errors import DecodeError, NetworkError, ScanInProgressError
from .history import ScanHistory
from .i18n import labels, severity_label, t
from .insights import InsightsClient
from .models import DiagnosisResult, ScanHistoryEntry, Tab, now_ms, to_data_url
from .prompts import Language, resolve_language
from .speech import SpeechPlayer, speech_text

logger = logging.getLogger("leafdoctor.controller")

Listener = Callable[[Dict[str, Any]], None]


@dataclass(frozen=True)
class Notification:
    kind: str
    message: str
    timestamp: int


@dataclass
class SessionState:
    tab: Tab = Tab.SCAN
    language: Language = Language.EN
    image_url: Optional[str] = None
    result: Optional[DiagnosisResult] = None
    loading: bool = False
    history: ScanHistory = field(default_factory=ScanHistory)
    notifications: List[Notification] = field(default_factory=list)
    insights: Optional[str] = None


class ScanController:
    """
    Single owner of the session state.
    Every change goes through one of the transitions below, and each one ends with a render.
    """

    def __init__(
        self,
        diagnosis: DiagnosisClient,
        speech: Optional[SpeechPlayer] = None,
        insights: Optional[InsightsClient] = None,
        language: Union[str, Language] = config.DEFAULT_LANG,
    ):
        self.diagnosis = diagnosis
        self.speech = speech
        self.insights = insights
        self.state = SessionState(language=resolve_language(language))
        self._listeners: List[Listener] = []

    # =========================
    # Rendering
    # =========================
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _render(self) -> Dict[str, Any]:
        view = self.view()
        for listener in self._listeners:
            listener(view)
        return view

    @property
    def capture_enabled(self) -> bool:
        return not self.state.loading

    def view(self) -> Dict[str, Any]:
        s = self.state
        lang = s.language.value
        view: Dict[str, Any] = {
            "tab": s.tab.value,
            "lang": lang,
            "labels": labels(lang),
            "loading": s.loading,
            "capture_enabled": self.capture_enabled,
            "notifications": [
                {"kind": n.kind, "message": n.message, "timestamp": n.timestamp}
                for n in s.notifications
            ],
        }

        if s.tab is Tab.SCAN:
            scan: Dict[str, Any] = {"image": s.image_url, "result": None}
            # result panel stays hidden while a diagnosis is pending
            if s.result is not None and not s.loading:
                scan["result"] = s.result.to_wire()
                scan["severity_label"] = severity_label(lang, s.result.severity)
                scan["healthy"] = s.result.is_healthy
            view["scan"] = scan
        elif s.tab is Tab.HISTORY:
            view["history"] = [
                {
                    "id": e.id,
                    "timestamp": e.timestamp,
                    "imageUrl": e.image_url,
                    "plantName": e.result.plant_name,
                    "diseaseName": e.result.disease_name,
                }
                for e in s.history.all()
            ]
        elif s.tab is Tab.EXTRAS:
            view["insights"] = s.insights
        return view

    def _notify(self, key: str) -> None:
        message = t(self.state.language.value, key)
        self.state.notifications.append(Notification(kind="error", message=message, timestamp=now_ms()))

    # =========================
    # Transitions
    # =========================
    async def capture(self, image: bytes, mime_type: str = "image/jpeg") -> Dict[str, Any]:
        """Show the photo, diagnose it, and on success prepend it to the history."""
        s = self.state
        if s.loading:
            raise ScanInProgressError("a diagnosis is already running")

        language = s.language
        image_url = to_data_url(image, mime_type)
        s.image_url = image_url
        s.result = None
        s.loading = True

        try:
            self._render()
            result = await self.diagnosis.diagnose(image, language, mime_type=mime_type)
        except (NetworkError, DecodeError) as e:
            logger.error("Diagnosis error: %s", e)
            self._notify("scanFailed")
        else:
            s.history.append(ScanHistoryEntry.create(image_url, result))
            # a clear or history selection while loading owns the scan view now
            if s.image_url is image_url:
                s.result = result
        finally:
            s.loading = False

        return self._render()

    def clear(self) -> Dict[str, Any]:
        self.state.image_url = None
        self.state.result = None
        return self._render()

    def select_history(self, entry_id: str) -> Dict[str, Any]:
        entry = self.state.history.get(entry_id)
        self.state.image_url = entry.image_url
        self.state.result = entry.result
        self.state.tab = Tab.SCAN
        return self._render()

    def switch_tab(self, tab: Union[str, Tab]) -> Dict[str, Any]:
        self.state.tab = Tab(tab)
        return self._render()

    def set_language(self, selector: Union[str, Language]) -> Dict[str, Any]:
        self.state.language = resolve_language(selector)
        return self._render()

    def speak_current(self) -> Dict[str, Any]:
        result = self.state.result
        if result is not None and self.speech is not None:
            self.speech.speak(speech_text(result))
        return self._render()

    async def load_insights(self, location: str) -> Dict[str, Any]:
        if self.insights is None:
            return self._render()
        try:
            self.state.insights = await self.insights.get_agri_insights(location)
        except (NetworkError, ValueError) as e:
            logger.error("Insights error: %s", e)
            self._notify("insightsFailed")
        return self._render()

    def dismiss_notifications(self) -> Dict[str, Any]:
        self.state.notifications.clear()
        return self._render()
