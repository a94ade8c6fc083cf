"""Models for normalized AI requests."""

import json
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from typing_extensions import Literal

import constants
from ai.errors import ValidationError


class ResponseFormat(str, Enum):
    """Desired shape of provider output."""

    TEXT = "text"
    JSON_OBJECT = "json_object"


class OperationClass(str, Enum):
    """Class of operation, used to select timeout and rate limit policy."""

    TEXT = "text"
    MULTIMODAL = "multimodal"


class Message(BaseModel):
    """One role-tagged turn of a conversation.

    Attributes:
        role: One of "system", "user" or "assistant".
        content: Free text content of the turn.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    role: Literal["system", "user", "assistant"] = Field(
        description="Role of the message author",
        examples=[constants.MESSAGE_ROLE_USER],
    )
    content: str = Field(
        description="Free text content of the message",
        examples=["Write a short greeting for a new customer"],
    )


class AIRequest(BaseModel):
    """Normalized unit of work for the orchestrator.

    The request is immutable once constructed. It is also the input for the
    cache key, see `canonical_json`.

    Attributes:
        model: Target model identifier.
        messages: Ordered, non-empty sequence of message turns.
        response_format: Optional desired output shape.
        temperature: Optional sampling temperature between 0.0 and 2.0.
        max_tokens: Optional maximum number of output tokens.
        stream: Optional flag to request streamed response from provider.

    Example:
        ```python
        request = AIRequest(model="gpt-4o", messages=[Message(role="user", content="ping")])
        ```
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    model: str = Field(
        min_length=1,
        description="Target model identifier",
        examples=["gpt-4o-mini"],
    )
    messages: tuple[Message, ...] = Field(
        min_length=1,
        description="Ordered sequence of role-tagged message turns",
    )
    response_format: Optional[ResponseFormat] = Field(
        None,
        description="Desired output shape, plain text or structured JSON",
        examples=[ResponseFormat.JSON_OBJECT],
    )
    temperature: Optional[float] = Field(
        None,
        ge=constants.MIN_TEMPERATURE,
        le=constants.MAX_TEMPERATURE,
        description="Sampling temperature",
        examples=[0.7],
    )
    max_tokens: Optional[int] = Field(
        None,
        gt=0,
        description="Maximum number of tokens in the output",
        examples=[500],
    )
    stream: Optional[bool] = Field(
        None,
        description="Request streamed output that is assembled into one response",
    )

    @field_validator("model")
    @classmethod
    def check_model(cls, value: str) -> str:
        """Check that model identifier is not blank."""
        if not value.strip():
            raise ValueError("Model identifier can not be blank")
        return value

    @property
    def wants_json(self) -> bool:
        """Check if structured JSON output has been requested."""
        return self.response_format == ResponseFormat.JSON_OBJECT

    def canonical_json(self) -> str:
        """Serialize request into stable textual form.

        Keys are sorted and every field is present, so two requests with the
        same field values always produce the same string regardless of how
        they were constructed.
        """
        return json.dumps(
            self.model_dump(mode="json"),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "AIRequest":
        """Construct request from untrusted payload.

        Raises:
            ValidationError: From the AI error taxonomy, naming the first
                offending field.
        """
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or "request"
            raise ValidationError(field, f"{field}: {first['msg']}") from e
