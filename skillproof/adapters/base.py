from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Protocol

from skillproof.schemas import (
    EvidenceType,
    PlatformCredentials,
    PlatformDescriptor,
    PlatformType,
    RawActivityRecord,
)

logger = logging.getLogger(__name__)

PayloadLoader = Callable[[PlatformCredentials], Any]
Clock = Callable[[], datetime]


class AdapterFetchError(RuntimeError):
    def __init__(self, platform_id: str, message: str):
        super().__init__(f"{platform_id}: {message}")
        self.platform_id = platform_id
        self.reason = message


class PlatformAdapter(Protocol):
    platform_id: str

    def fetch(self, credentials: PlatformCredentials) -> list[RawActivityRecord]: ...

    def validate(self, credentials: PlatformCredentials) -> bool: ...

    def describe(self) -> PlatformDescriptor: ...


def payload_from_credentials(credentials: PlatformCredentials) -> Any:
    """Default loader: the caller already fetched the native payload."""
    return credentials.payload


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """Best-effort parse of ISO-8601, epoch seconds or RFC 2822 dates."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    text = str(value).strip()
    if text.isdigit():
        return parse_timestamp(int(text))
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def as_items(payload: Any, key: str | None = None) -> list[dict[str, Any]]:
    """Pull a list of mapping items out of a payload section, unwrapping paged responses."""
    section = payload.get(key) if key is not None and isinstance(payload, Mapping) else payload
    if isinstance(section, Mapping):
        for wrapper in ("values", "items", "models", "result", "data"):
            inner = section.get(wrapper)
            if isinstance(inner, list):
                section = inner
                break
        else:
            section = [section]
    if not isinstance(section, list):
        return []
    return [item for item in section if isinstance(item, Mapping)]


def as_tag_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, Iterable):
        return [str(part).strip() for part in value if part is not None and str(part).strip()]
    return []


class AdapterBase:
    platform_id = ""
    name = ""
    platform_type = PlatformType.CUSTOM
    description = ""
    accepted_credentials: tuple[str, ...] = ()

    def __init__(self, loader: PayloadLoader | None = None, clock: Clock | None = None) -> None:
        self._loader = loader or payload_from_credentials
        self._clock = clock or utc_now

    def describe(self) -> PlatformDescriptor:
        return PlatformDescriptor(
            platform_id=self.platform_id,
            name=self.name,
            platform_type=self.platform_type,
            description=self.description,
            accepted_credentials=list(self.accepted_credentials),
        )

    def validate(self, credentials: PlatformCredentials) -> bool:
        if not self.accepted_credentials:
            return True
        return any(credentials.value(field) for field in self.accepted_credentials)

    def fetch(self, credentials: PlatformCredentials) -> list[RawActivityRecord]:
        try:
            payload = self._loader(credentials)
        except AdapterFetchError:
            raise
        except Exception as exc:
            raise AdapterFetchError(self.platform_id, f"payload loader failed: {exc}") from exc

        if payload is None:
            raise AdapterFetchError(self.platform_id, "no payload supplied")

        try:
            records = self.parse(payload)
        except (TypeError, ValueError, KeyError, AttributeError) as exc:
            raise AdapterFetchError(self.platform_id, f"unexpected payload shape: {exc}") from exc

        logger.debug("adapter_parsed platform=%s records=%s", self.platform_id, len(records))
        return records

    def parse(self, payload: Any) -> list[RawActivityRecord]:
        raise NotImplementedError

    def _require_mapping(self, payload: Any) -> Mapping[str, Any]:
        if not isinstance(payload, Mapping):
            raise ValueError(f"expected a mapping payload, got {type(payload).__name__}")
        return payload

    def _record(
        self,
        record_id: Any,
        evidence_type: EvidenceType,
        timestamp: Any,
        metadata: Mapping[str, Any],
    ) -> RawActivityRecord:
        clean = {key: value for key, value in metadata.items() if value is not None}
        clean["platform"] = self.platform_id
        return RawActivityRecord(
            id=str(record_id),
            platform_id=self.platform_id,
            evidence_type=evidence_type.value,
            timestamp=parse_timestamp(timestamp),
            metadata=clean,
        )
