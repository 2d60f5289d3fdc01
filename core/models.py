# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the Vitally adapter)
# =============================================================================
#
# These dataclasses mirror the Vitally REST resources the adapter reads.
# Each one knows two things:
#
#   from_payload()  →  how to lift a raw JSON dict into the dataclass
#   summary()       →  the bounded projection a tool hands back to the host
#
# Projections drop unset fields.  Only get_account_details / get_note_by_id
# ever return a raw upstream record; everything else goes through here.
#
# Trait maps are deliberately untyped per key: trait keys are defined in
# Vitally (see list_custom_traits) and are opaque to this process.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Optional, Union

TraitValue = Union[str, int, float, bool, None]
Traits = dict[str, Any]

ACCOUNT_URI_SCHEME = "vitally"


def compact(values: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None (unset upstream)."""
    return {key: value for key, value in values.items() if value is not None}


def account_uri(account_id: str) -> str:
    """Addressable resource URI for an account, e.g. vitally://account/1."""
    return f"{ACCOUNT_URI_SCHEME}://account/{account_id}"


# -----------------------------------------------------------------------------
# AccountRef — the denormalised {id, name} hint carried by child records
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class AccountRef:
    id: str
    name: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Optional[dict]) -> Optional["AccountRef"]:
        if not payload or payload.get("id") is None:
            return None
        return cls(id=str(payload["id"]), name=payload.get("name"))


# -----------------------------------------------------------------------------
# Account — the record mirrored into the AccountCache
# -----------------------------------------------------------------------------
@dataclass
class Account:
    """A customer account tracked in Vitally."""

    id: str
    name: str
    external_id: Optional[str] = None

    # --- Success metrics ---
    health_score: Optional[float] = None
    mrr: Optional[float] = None
    nps_score: Optional[float] = None
    users_count: Optional[int] = None

    # --- Lifecycle timestamps (ISO strings, passed through untouched) ---
    first_seen_timestamp: Optional[str] = None
    last_seen_timestamp: Optional[str] = None
    churned_at: Optional[str] = None
    next_renewal_date: Optional[str] = None
    trial_end_date: Optional[str] = None

    # --- Ownership & grouping ---
    csm_id: Optional[str] = None
    segments: list[dict[str, Any]] = field(default_factory=list)
    traits: Optional[Traits] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "Account":
        return cls(
            id=str(payload["id"]),
            name=payload.get("name") or "",
            external_id=payload.get("externalId"),
            health_score=payload.get("healthScore"),
            mrr=payload.get("mrr"),
            nps_score=payload.get("npsScore"),
            users_count=payload.get("usersCount"),
            first_seen_timestamp=payload.get("firstSeenTimestamp"),
            last_seen_timestamp=payload.get("lastSeenTimestamp"),
            churned_at=payload.get("churnedAt"),
            next_renewal_date=payload.get("nextRenewalDate"),
            trial_end_date=payload.get("trialEndDate"),
            csm_id=payload.get("csmId"),
            segments=list(payload.get("segments") or []),
            traits=payload.get("traits"),
        )

    @property
    def uri(self) -> str:
        return account_uri(self.id)

    def summary(self) -> dict[str, Any]:
        """Projection used by search_accounts and find_account_by_name."""
        return compact({
            "id": self.id,
            "name": self.name,
            "externalId": self.external_id,
            "healthScore": self.health_score,
            "mrr": self.mrr,
            "npsScore": self.nps_score,
            "usersCount": self.users_count,
            "lastSeenTimestamp": self.last_seen_timestamp,
            "uri": self.uri,
        })

    def success_summary(self) -> dict[str, Any]:
        """Wider projection used by refresh_accounts."""
        return compact({
            "id": self.id,
            "name": self.name,
            "externalId": self.external_id,
            "healthScore": self.health_score,
            "mrr": self.mrr,
            "npsScore": self.nps_score,
            "usersCount": self.users_count,
            "churnedAt": self.churned_at,
            "lastSeenTimestamp": self.last_seen_timestamp,
            "nextRenewalDate": self.next_renewal_date,
            "csmId": self.csm_id,
            "traits": self.traits,
        })


@dataclass
class User:
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    external_id: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "User":
        return cls(
            id=str(payload["id"]),
            name=payload.get("name"),
            email=payload.get("email"),
            external_id=payload.get("externalId"),
        )

    def summary(self) -> dict[str, Any]:
        return compact({
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "externalId": self.external_id,
        })


@dataclass
class Conversation:
    id: str
    subject: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    account: Optional[AccountRef] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "Conversation":
        return cls(
            id=str(payload["id"]),
            subject=payload.get("subject"),
            created_at=payload.get("createdAt"),
            updated_at=payload.get("updatedAt"),
            account=AccountRef.from_payload(payload.get("account")),
        )

    def summary(self) -> dict[str, Any]:
        return compact({
            "id": self.id,
            "subject": self.subject,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        })


@dataclass
class Task:
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    account: Optional[AccountRef] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "Task":
        return cls(
            id=str(payload["id"]),
            title=payload.get("title"),
            description=payload.get("description"),
            status=payload.get("status"),
            due_date=payload.get("dueDate"),
            created_at=payload.get("createdAt"),
            updated_at=payload.get("updatedAt"),
            account=AccountRef.from_payload(payload.get("account")),
        )

    def summary(self) -> dict[str, Any]:
        return compact({
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "dueDate": self.due_date,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        })


@dataclass
class Note:
    id: str
    content: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    account: Optional[AccountRef] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "Note":
        return cls(
            id=str(payload["id"]),
            content=payload.get("content"),
            created_at=payload.get("createdAt"),
            updated_at=payload.get("updatedAt"),
            account=AccountRef.from_payload(payload.get("account")),
        )

    def summary(self) -> dict[str, Any]:
        return compact({
            "id": self.id,
            "content": self.content,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        })

    def created_summary(self) -> dict[str, Any]:
        """What create_account_note reports back: no updatedAt."""
        return compact({
            "id": self.id,
            "content": self.content,
            "createdAt": self.created_at,
        })


@dataclass
class NpsResponse:
    """A single NPS survey answer (0-10 score plus optional feedback)."""

    id: str
    user_id: Optional[str] = None
    score: Optional[int] = None
    feedback: Optional[str] = None
    responded_at: Optional[str] = None
    external_id: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "NpsResponse":
        return cls(
            id=str(payload["id"]),
            user_id=payload.get("userId"),
            score=payload.get("score"),
            feedback=payload.get("feedback"),
            responded_at=payload.get("respondedAt"),
            external_id=payload.get("externalId"),
        )

    def summary(self) -> dict[str, Any]:
        return compact({
            "id": self.id,
            "userId": self.user_id,
            "score": self.score,
            "feedback": self.feedback,
            "respondedAt": self.responded_at,
        })


@dataclass
class Project:
    """A tracked engagement (onboarding, implementation...) on an account."""

    id: str
    name: Optional[str] = None
    account_id: Optional[str] = None
    duration_in_days: Optional[int] = None
    target_start_date: Optional[str] = None
    actual_start_date: Optional[str] = None
    actual_completion_date: Optional[str] = None
    project_status_id: Optional[str] = None
    project_category_id: Optional[str] = None
    traits: Optional[Traits] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "Project":
        return cls(
            id=str(payload["id"]),
            name=payload.get("name"),
            account_id=payload.get("accountId"),
            duration_in_days=payload.get("durationInDays"),
            target_start_date=payload.get("targetStartDate"),
            actual_start_date=payload.get("actualStartDate"),
            actual_completion_date=payload.get("actualCompletionDate"),
            project_status_id=payload.get("projectStatusId"),
            project_category_id=payload.get("projectCategoryId"),
            traits=payload.get("traits"),
            created_at=payload.get("createdAt"),
            updated_at=payload.get("updatedAt"),
        )

    def summary(self) -> dict[str, Any]:
        return compact({
            "id": self.id,
            "name": self.name,
            "durationInDays": self.duration_in_days,
            "targetStartDate": self.target_start_date,
            "actualStartDate": self.actual_start_date,
            "actualCompletionDate": self.actual_completion_date,
            "projectStatusId": self.project_status_id,
            "projectCategoryId": self.project_category_id,
            "traits": self.traits,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        })


@dataclass
class CustomFieldDefinition:
    """A custom trait definition; `path` is the dotted trait key."""

    label: str
    type: str
    path: str
    created_at: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "CustomFieldDefinition":
        return cls(
            label=payload.get("label") or "",
            type=payload.get("type") or "",
            path=payload.get("path") or "",
            created_at=payload.get("createdAt"),
        )

    def summary(self) -> dict[str, Any]:
        return compact({
            "label": self.label,
            "type": self.type,
            "key": self.path,
            "createdAt": self.created_at,
        })


# -----------------------------------------------------------------------------
# ToolDescriptor — one entry of the static tool catalog (core/registry.py)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    required_params: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "requiredParams": list(self.required_params),
        }
