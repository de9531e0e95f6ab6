"""
Notification schemas: inbox filters, read/archive/delete actions, per-type
preferences with quiet hours, and the admin "create notification" form.
"""

import re
from enum import Enum
from types import MappingProxyType
from typing import Annotated, List, Literal, Mapping, Optional

from pydantic import AfterValidator, BaseModel, Field

from validations.schema import IsoDateTime, Url, max_length, min_length


class NotificationType(str, Enum):
    # Account
    ACCOUNT_ACTIVATED = "ACCOUNT_ACTIVATED"
    NEW_REGISTRATION = "NEW_REGISTRATION"
    PROFILE_COMPLETED = "PROFILE_COMPLETED"
    PARENT_DATA_REQUESTED = "PARENT_DATA_REQUESTED"
    # Contracts
    CONTRACT_ASSIGNED = "CONTRACT_ASSIGNED"
    CONTRACT_SIGNED = "CONTRACT_SIGNED"
    CONTRACT_REMINDER = "CONTRACT_REMINDER"
    CONTRACT_EXPIRED = "CONTRACT_EXPIRED"
    CONTRACT_CANCELLED = "CONTRACT_CANCELLED"
    # Calendar
    EVENT_INVITATION = "EVENT_INVITATION"
    EVENT_REMINDER = "EVENT_REMINDER"
    EVENT_UPDATED = "EVENT_UPDATED"
    EVENT_CANCELLED = "EVENT_CANCELLED"
    # Simulations
    SIMULATION_ASSIGNED = "SIMULATION_ASSIGNED"
    SIMULATION_REMINDER = "SIMULATION_REMINDER"
    SIMULATION_READY = "SIMULATION_READY"
    SIMULATION_STARTED = "SIMULATION_STARTED"
    SIMULATION_RESULTS = "SIMULATION_RESULTS"
    SIMULATION_COMPLETED = "SIMULATION_COMPLETED"
    # Staff
    STAFF_ABSENCE = "STAFF_ABSENCE"
    ABSENCE_REQUEST = "ABSENCE_REQUEST"
    ABSENCE_CONFIRMED = "ABSENCE_CONFIRMED"
    ABSENCE_REJECTED = "ABSENCE_REJECTED"
    SUBSTITUTION_ASSIGNED = "SUBSTITUTION_ASSIGNED"
    # Questions and materials
    QUESTION_FEEDBACK = "QUESTION_FEEDBACK"
    OPEN_ANSWER_TO_REVIEW = "OPEN_ANSWER_TO_REVIEW"
    MATERIAL_AVAILABLE = "MATERIAL_AVAILABLE"
    # Groups and messages
    GROUP_MEMBER_ADDED = "GROUP_MEMBER_ADDED"
    GROUP_REFERENT_ASSIGNED = "GROUP_REFERENT_ASSIGNED"
    MESSAGE_RECEIVED = "MESSAGE_RECEIVED"
    # Public forms and system
    JOB_APPLICATION = "JOB_APPLICATION"
    CONTACT_REQUEST = "CONTACT_REQUEST"
    ATTENDANCE_RECORDED = "ATTENDANCE_RECORDED"
    SYSTEM_ALERT = "SYSTEM_ALERT"
    GENERAL = "GENERAL"


class NotificationChannel(str, Enum):
    IN_APP = "IN_APP"
    EMAIL = "EMAIL"
    BOTH = "BOTH"


NOTIFICATION_CHANNEL_LABELS: Mapping[NotificationChannel, str] = MappingProxyType({
    NotificationChannel.IN_APP: "Nella piattaforma",
    NotificationChannel.EMAIL: "Email",
    NotificationChannel.BOTH: "Piattaforma ed email",
})

MAX_IDS_PER_REQUEST = 100

# HH:MM on a 24-hour clock
QUIET_HOURS_PATTERN = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")
QUIET_HOURS_MESSAGE = "Orario non valido (formato HH:MM)"


def _check_quiet_hour(value: str) -> str:
    if not QUIET_HOURS_PATTERN.fullmatch(value):
        raise ValueError(QUIET_HOURS_MESSAGE)
    return value


QuietHour = Annotated[str, AfterValidator(_check_quiet_hour)]

NotificationIds = Annotated[
    List[str],
    min_length(1, "Seleziona almeno una notifica"),
    max_length(MAX_IDS_PER_REQUEST, f"Puoi selezionare al massimo {MAX_IDS_PER_REQUEST} notifiche"),
]


class GetNotificationsFilter(BaseModel):
    page: Annotated[int, Field(ge=1)] = 1
    page_size: Annotated[int, Field(ge=1, le=100)] = 20
    unread_only: bool = False
    archived_only: bool = False
    types: Optional[List[NotificationType]] = None
    is_urgent: Optional[bool] = None
    search: Optional[str] = None
    sort_order: Literal["asc", "desc"] = "desc"


class MarkNotificationRead(BaseModel):
    notification_id: str


class MarkNotificationsRead(BaseModel):
    notification_ids: NotificationIds


class ArchiveNotifications(BaseModel):
    notification_ids: NotificationIds


class DeleteNotifications(BaseModel):
    notification_ids: NotificationIds


class ArchiveAllRead(BaseModel):
    """Archive every read notification, or only those older than the given number of days."""
    older_than_days: Optional[Annotated[int, Field(ge=0, le=365)]] = None


class UpdatePreference(BaseModel):
    notification_type: NotificationType
    in_app_enabled: Optional[bool] = None
    email_enabled: Optional[bool] = None
    # None clears the quiet window
    quiet_hours_start: Optional[QuietHour] = None
    quiet_hours_end: Optional[QuietHour] = None


class PreferenceEntry(BaseModel):
    notification_type: NotificationType
    in_app_enabled: bool
    email_enabled: bool


class BulkUpdatePreferences(BaseModel):
    preferences: Annotated[List[PreferenceEntry], min_length(1, "Indica almeno una preferenza")]


class CreateNotification(BaseModel):
    """
    Notification sent by an admin. Recipients are user_id, user_ids or every
    user with the given role; with none of them the notification goes to everyone.
    """
    user_id: Optional[str] = None
    user_ids: Optional[List[str]] = None
    role: Optional[Literal["ADMIN", "COLLABORATOR", "STUDENT"]] = None
    type: NotificationType = NotificationType.GENERAL
    title: Annotated[
        str,
        min_length(1, "Il titolo è obbligatorio"),
        max_length(200, "Titolo troppo lungo"),
    ]
    message: Annotated[
        str,
        min_length(1, "Il messaggio è obbligatorio"),
        max_length(2000, "Messaggio troppo lungo"),
    ]
    channel: NotificationChannel = NotificationChannel.IN_APP
    link_url: Optional[Url] = None
    is_urgent: bool = False
    expires_at: Optional[IsoDateTime] = None
