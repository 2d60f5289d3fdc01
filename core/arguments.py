# =============================================================================
# core/arguments.py  —  Typed argument records, one per tool
# =============================================================================
#
# Tool calls arrive as loosely-typed dicts with camelCase keys.  Before any
# business logic runs, the Dispatcher decodes them into one of the pydantic
# models below (decode_arguments).  A failed decode becomes a
# core.errors.ValidationError naming the offending argument(s).  No network
# call happens on that path.
#
# Conventions:
#   - Python attribute names are snake_case, wire names are the aliases.
#   - Unknown keys are ignored.
#   - Numeric ids are accepted and turned into strings ("accountId": 1).
#   - Required strings must be non-empty.
# =============================================================================

from typing import Any, Literal, Optional, Type, TypeVar, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from core.errors import ValidationError
from core.models import TraitValue

CustomFieldModel = Literal["accounts", "users", "notes", "tasks", "projects", "organizations"]
AccountStatus = Literal["active", "churned", "activeOrChurned"]

CUSTOM_FIELD_MODELS: tuple[str, ...] = get_args(CustomFieldModel)
ACCOUNT_STATUSES: tuple[str, ...] = get_args(AccountStatus)

DEFAULT_LIMIT = 10
DEFAULT_REFRESH_LIMIT = 100


class ToolArguments(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


class SearchToolsArgs(ToolArguments):
    keyword: str = Field(min_length=1)


class SearchUsersArgs(ToolArguments):
    email: Optional[str] = None
    external_id: Optional[str] = Field(default=None, alias="externalId")
    email_subdomain: Optional[str] = Field(default=None, alias="emailSubdomain")

    @model_validator(mode="after")
    def _one_criterion(self) -> "SearchUsersArgs":
        if not (self.email or self.external_id or self.email_subdomain):
            raise ValueError(
                "At least one search parameter (email, externalId, or emailSubdomain) is required"
            )
        return self


class SearchAccountsArgs(ToolArguments):
    name: Optional[str] = None
    external_id: Optional[str] = Field(default=None, alias="externalId")
    limit: int = Field(default=DEFAULT_LIMIT, ge=1)

    @model_validator(mode="after")
    def _one_criterion(self) -> "SearchAccountsArgs":
        if not (self.name or self.external_id):
            raise ValueError("At least one search parameter (name or externalId) is required")
        return self


class FindAccountByNameArgs(ToolArguments):
    name: str = Field(min_length=1)


class AccountIdArgs(ToolArguments):
    account_id: str = Field(alias="accountId", min_length=1)


class AccountListArgs(AccountIdArgs):
    limit: int = Field(default=DEFAULT_LIMIT, ge=1)


class AccountTasksArgs(AccountListArgs):
    status: Optional[str] = None


class NoteIdArgs(ToolArguments):
    note_id: str = Field(alias="noteId", min_length=1)


class CreateNoteArgs(AccountIdArgs):
    content: str = Field(min_length=1)


class RefreshAccountsArgs(ToolArguments):
    limit: int = Field(default=DEFAULT_REFRESH_LIMIT, ge=1)
    status: AccountStatus = "active"


class ListCustomTraitsArgs(ToolArguments):
    model: CustomFieldModel

    @field_validator("model", mode="before")
    @classmethod
    def _pluralise(cls, value: Any) -> Any:
        # "account" and "accounts" both name the same object kind.
        if isinstance(value, str) and value and f"{value}s" in CUSTOM_FIELD_MODELS:
            return f"{value}s"
        return value


class UpdateTraitsArgs(AccountIdArgs):
    traits: dict[str, TraitValue] = Field(min_length=1)


# -----------------------------------------------------------------------------
# Decoding
# -----------------------------------------------------------------------------
ArgsT = TypeVar("ArgsT", bound=ToolArguments)

_MISSING_TYPES = {"missing", "string_too_short", "too_short"}


def decode_arguments(model: Type[ArgsT], arguments: Optional[dict[str, Any]]) -> ArgsT:
    """Validate a raw argument map into `model`, or raise ValidationError."""
    try:
        return model.model_validate(arguments or {})
    except PydanticValidationError as exc:
        raise _translate(exc) from None


def _translate(exc: PydanticValidationError) -> ValidationError:
    missing: list[str] = []
    invalid: list[str] = []
    problems: list[str] = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"])
        if not field:
            # Model-level rule (e.g. "at least one of ..."); message says it all.
            problems.append(str(error["msg"]).removeprefix("Value error, "))
        elif error["type"] in _MISSING_TYPES:
            missing.append(field)
        else:
            invalid.append(field)
            problems.append(f"Invalid argument '{field}': {error['msg']}")

    messages = []
    if missing:
        noun = "argument" if len(missing) == 1 else "arguments"
        messages.append(f"Missing required {noun}: {', '.join(missing)}")
    messages.extend(problems)
    return ValidationError("; ".join(messages), missing + invalid)
