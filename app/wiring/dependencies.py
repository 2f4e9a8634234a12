from functools import lru_cache
import logging
from pathlib import Path
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.infrastructure.llm.mock_llm import MockChatLLM
from app.infrastructure.llm.openai_llm import OpenAIChatLLM
from app.infrastructure.store.json_store import JsonAppointmentStore, JsonSessionStore
from app.infrastructure.store.memory_store import MemoryAppointmentStore, MemorySessionStore
from app.infrastructure.whatsapp.mock_platform import MockWhatsAppPlatform
from app.infrastructure.whatsapp.twilio_client import TwilioClient
from app.infrastructure.whatsapp.twilio_platform import TwilioWhatsAppPlatform
from app.application.ports.appointment_store import AppointmentStorePort
from app.application.ports.llm import ChatLLMPort
from app.application.ports.message_platform import MessagePlatformPort
from app.application.ports.session_store import SessionStorePort
from app.application.use_cases.booking import BookingUseCase
from app.application.use_cases.generate_reply import GenerateReplyUseCase
from app.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from app.application.use_cases.send_reply import SendReplyUseCase


_session_store: SessionStorePort | None = None
_appointment_store: AppointmentStorePort | None = None
_platform: MessagePlatformPort | None = None


def _is_local() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


def _use_memory_stores() -> bool:
    return settings.STORE_BACKEND.lower() == "memory"


@lru_cache
def get_llm() -> ChatLLMPort:
    if settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip():
        return OpenAIChatLLM()
    return MockChatLLM()


def get_session_store() -> SessionStorePort:
    global _session_store
    if _session_store is None:
        if not _use_memory_stores():
            _session_store = JsonSessionStore(data_dir=str(Path(settings.DATA_DIR) / "sessions"))
        else:
            _session_store = MemorySessionStore()
    return _session_store


def get_appointment_store() -> AppointmentStorePort:
    global _appointment_store
    if _appointment_store is None:
        if not _use_memory_stores():
            _appointment_store = JsonAppointmentStore(data_dir=str(Path(settings.DATA_DIR) / "appointments"))
        else:
            _appointment_store = MemoryAppointmentStore()
    return _appointment_store


def get_clinic_timezone() -> ZoneInfo:
    try:
        return ZoneInfo(settings.CLINIC_TIMEZONE)
    except Exception:
        logging.getLogger(__name__).warning(
            "Unknown CLINIC_TIMEZONE, falling back to UTC", extra={"reason": settings.CLINIC_TIMEZONE}
        )
        return ZoneInfo("UTC")


def get_whatsapp_platform() -> MessagePlatformPort:
    global _platform
    if _platform is not None:
        return _platform

    logger = logging.getLogger(__name__)
    logger.info(
        "TWILIO credentials present=%s sender present=%s",
        bool(settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN),
        bool(settings.TWILIO_WHATSAPP_NUMBER),
    )
    logger.info("ENV=%s", settings.ENV)

    if not (settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN and settings.TWILIO_WHATSAPP_NUMBER):
        if _is_local():
            logger.info("Using MockWhatsAppPlatform (Twilio settings missing, ENV=dev/local)")
            _platform = MockWhatsAppPlatform()
            return _platform
        raise ValueError(
            "TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_WHATSAPP_NUMBER are required to send WhatsApp replies."
        )

    logger.info("Using real TwilioWhatsAppPlatform")
    client = TwilioClient(
        account_sid=settings.TWILIO_ACCOUNT_SID,
        auth_token=settings.TWILIO_AUTH_TOKEN,
        from_number=settings.TWILIO_WHATSAPP_NUMBER,
    )
    _platform = TwilioWhatsAppPlatform(client=client)
    return _platform


def get_booking_use_case() -> BookingUseCase:
    return BookingUseCase(
        appointment_store=get_appointment_store(),
        timezone=get_clinic_timezone(),
    )


def get_handle_incoming_message_use_case() -> HandleIncomingMessageUseCase:
    return HandleIncomingMessageUseCase(
        session_store=get_session_store(),
        booking_use_case=get_booking_use_case(),
        generate_reply=GenerateReplyUseCase(llm=get_llm()),
        send_reply=SendReplyUseCase(
            platform=get_whatsapp_platform(),
            auto_reply_enabled=settings.AUTO_REPLY_ENABLED,
            max_message_length=settings.MAX_MESSAGE_LENGTH,
        ),
        thinking_indicator_enabled=settings.THINKING_INDICATOR_ENABLED,
    )


def get_container() -> dict[str, object]:
    return {
        "use_case": get_handle_incoming_message_use_case(),
        "session_store": get_session_store(),
        "appointment_store": get_appointment_store(),
        "platform": get_whatsapp_platform(),
    }
