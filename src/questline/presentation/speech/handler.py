"""Request handler for voice-assistant style JSON envelopes."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping

from questline.config import Settings, load_settings
from questline.data.repositories import QuestRepository
from questline.domain.commands import Command, Repeat
from questline.presentation.speech.intents import UnsupportedIntent, command_from_intent
from questline.services.turn_service import TurnResult, TurnService

logger = logging.getLogger(__name__)

QUEST_INSTANCE_ATTRIBUTE = "QUEST_INSTANCE"
RESPONSE_VERSION = "1.0"


class RequestRejected(Exception):
    """Raised for requests the skill refuses to serve."""


class SpeechRequestHandler:
    """Routes launch, intent and session-ended requests to the turn service.

    The quest state travels in the session attributes, so every request is
    handled without any process-resident session.
    """

    def __init__(
        self,
        turn_service: TurnService,
        *,
        supported_application_ids: Iterable[str] = (),
    ) -> None:
        self._turn_service = turn_service
        self._supported_application_ids = frozenset(supported_application_ids)

    def handle(self, envelope: Mapping[str, Any]) -> Dict[str, Any]:
        if not isinstance(envelope, Mapping):
            raise RequestRejected("Request envelope must be an object.")
        session = envelope.get("session")
        session = session if isinstance(session, Mapping) else {}
        request = envelope.get("request")
        if not isinstance(request, Mapping):
            raise RequestRejected("Request envelope has no request section.")
        self._verify_application(session)

        request_type = request.get("type")
        session_id = session.get("sessionId")
        logger.info(
            "%s requestId=%s, sessionId=%s", request_type, request.get("requestId"), session_id
        )
        if session.get("new"):
            logger.info("Session started sessionId=%s", session_id)

        if request_type == "SessionEndedRequest":
            return self._build_end_response()
        if request_type == "LaunchRequest":
            command: Command = Repeat()
        elif request_type == "IntentRequest":
            try:
                command = command_from_intent(request.get("intent"))
            except UnsupportedIntent as exc:
                raise RequestRejected(str(exc)) from exc
        else:
            raise RequestRejected(f"Unsupported request type: {request_type!r}")

        attributes = session.get("attributes")
        prior_state = (
            attributes.get(QUEST_INSTANCE_ATTRIBUTE) if isinstance(attributes, Mapping) else None
        )
        result = self._turn_service.handle(command, prior_state)
        return self._build_response(result)

    def _verify_application(self, session: Mapping[str, Any]) -> None:
        if not self._supported_application_ids:
            return
        application = session.get("application")
        app_id = application.get("applicationId") if isinstance(application, Mapping) else None
        if app_id not in self._supported_application_ids:
            logger.warning("Rejected request for application id %r", app_id)
            raise RequestRejected(f"Unsupported application id: {app_id!r}")

    @staticmethod
    def _build_response(result: TurnResult) -> Dict[str, Any]:
        response: Dict[str, Any] = {
            "outputSpeech": {"type": "PlainText", "text": result.prompt_text},
            "shouldEndSession": not result.expect_more_input,
        }
        if result.expect_more_input:
            reprompt = result.reprompt_text or result.prompt_text
            response["reprompt"] = {"outputSpeech": {"type": "PlainText", "text": reprompt}}
        session_attributes: Dict[str, Any] = {}
        if result.state is not None:
            session_attributes[QUEST_INSTANCE_ATTRIBUTE] = result.state
        return {
            "version": RESPONSE_VERSION,
            "sessionAttributes": session_attributes,
            "response": response,
        }

    @staticmethod
    def _build_end_response() -> Dict[str, Any]:
        return {
            "version": RESPONSE_VERSION,
            "sessionAttributes": {},
            "response": {"shouldEndSession": True},
        }


def build_speech_handler(settings: Settings | None = None) -> SpeechRequestHandler:
    """Construct the handler with a cached quest repository from settings."""
    settings = settings or load_settings()
    quest_repo = QuestRepository(settings.quest_file)
    turn_service = TurnService(quest_repo.load, max_hops=settings.max_auto_advance_hops)
    return SpeechRequestHandler(
        turn_service,
        supported_application_ids=settings.supported_application_ids,
    )


_default_handler: SpeechRequestHandler | None = None


def lambda_handler(event: Mapping[str, Any], context: object = None) -> Dict[str, Any]:
    """Serverless entry point; the handler and its quest cache live per process."""
    global _default_handler
    if _default_handler is None:
        _default_handler = build_speech_handler()
    return _default_handler.handle(event)
