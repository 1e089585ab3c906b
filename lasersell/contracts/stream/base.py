from __future__ import annotations

from typing import Any, ClassVar, Mapping

from pydantic import BaseModel, ConfigDict, model_validator


class WireFragment(BaseModel):
    """
    Base for nested protocol records (market payloads, strategy, limits).

    Design goals:
    - Immutable instances (frozen) so decoded values never share mutable state.
    - Forward-compatible parsing (extra="ignore") so MINOR schema additions from newer
      peers do not break older decoders, and unknown keys are never re-emitted.
    """

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # Legacy field names accepted on decode, keyed by the current field name.
    # Consulted in order, only when the current name is missing or null. Never emitted.
    FIELD_ALIASES: ClassVar[Mapping[str, tuple[str, ...]]] = {}

    @model_validator(mode="before")
    @classmethod
    def _resolve_field_aliases(cls, data: Any) -> Any:
        if not cls.FIELD_ALIASES or not isinstance(data, Mapping):
            return data
        resolved = dict(data)
        for name, legacy_names in cls.FIELD_ALIASES.items():
            if resolved.get(name) is not None:
                continue
            for legacy in legacy_names:
                if resolved.get(legacy) is not None:
                    resolved[name] = resolved[legacy]
                    break
        return resolved


class WireMessage(WireFragment):
    """
    Base for top-level client/server messages.

    Every subclass declares `message_type: Literal[<tag>]` aliased to the `type` key.
    """

    def to_text(self) -> str:
        """
        Encode this message as its compact JSON wire text.
        """

        from lasersell.common.schemas.codec import encode_message  # noqa: WPS433

        return encode_message(self)
