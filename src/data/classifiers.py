"""Response classifiers for provider payloads.

Each classifier turns a raw provider body into a tagged
:class:`ProviderOutcome`, so the router can decide between "normalize
this" and "try the next provider" without knowing either provider's
error conventions.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any


class OutcomeKind(str, Enum):
    """Classification of a decoded provider response."""

    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    NO_DATA = "no_data"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class ProviderOutcome:
    """Tagged result of classifying a provider response.

    Attributes:
        kind: Outcome classification.
        payload: The raw body, only set on success.
        detail: Provider message explaining a failure, if any.
    """

    kind: OutcomeKind
    payload: Any = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the payload should be normalized."""
        return self.kind == OutcomeKind.SUCCESS

    @classmethod
    def success(cls, payload: Any) -> "ProviderOutcome":
        return cls(OutcomeKind.SUCCESS, payload=payload)

    @classmethod
    def rate_limited(cls, detail: str | None = None) -> "ProviderOutcome":
        return cls(OutcomeKind.RATE_LIMITED, detail=detail)

    @classmethod
    def no_data(cls, detail: str | None = None) -> "ProviderOutcome":
        return cls(OutcomeKind.NO_DATA, detail=detail)

    @classmethod
    def malformed(cls, detail: str | None = None) -> "ProviderOutcome":
        return cls(OutcomeKind.MALFORMED, detail=detail)


Classifier = Callable[[Any], ProviderOutcome]


# ============================================================================
# Alpha Vantage
# ============================================================================

# Alpha Vantage reports throttling as "Note" (older) or "Information" (newer)
ALPHA_VANTAGE_LIMIT_FIELDS = ("Note", "Information")
ALPHA_VANTAGE_ERROR_FIELD = "Error Message"


def _alpha_vantage(
    has_data: Callable[[dict[str, Any]], bool], what: str
) -> Classifier:
    """Build an Alpha Vantage classifier around a success-marker check."""

    def classify(body: Any) -> ProviderOutcome:
        if not isinstance(body, dict):
            return ProviderOutcome.malformed(f"Expected an object, got {type(body).__name__}")

        for field in ALPHA_VANTAGE_LIMIT_FIELDS:
            if field in body:
                return ProviderOutcome.rate_limited(str(body[field]))

        if ALPHA_VANTAGE_ERROR_FIELD in body:
            return ProviderOutcome.malformed(str(body[ALPHA_VANTAGE_ERROR_FIELD]))

        if not has_data(body):
            return ProviderOutcome.no_data(f"No {what} in response")

        return ProviderOutcome.success(body)

    return classify


def _non_empty(value: Any, kind: type) -> bool:
    return isinstance(value, kind) and len(value) > 0


classify_alpha_vantage_search = _alpha_vantage(
    lambda body: _non_empty(body.get("bestMatches"), list), "bestMatches"
)
classify_alpha_vantage_quote = _alpha_vantage(
    lambda body: _non_empty(body.get("Global Quote"), dict), "Global Quote"
)
classify_alpha_vantage_overview = _alpha_vantage(
    lambda body: bool(body.get("Symbol")), "Symbol"
)
classify_alpha_vantage_history = _alpha_vantage(
    lambda body: isinstance(body.get("Time Series (Daily)"), dict), "Time Series (Daily)"
)


# ============================================================================
# Finnhub
# ============================================================================


def _finnhub_error(body: dict[str, Any]) -> ProviderOutcome | None:
    """Map Finnhub's ``{"error": "..."}`` bodies to an outcome."""
    error = body.get("error")
    if not error:
        return None
    message = str(error)
    if "limit" in message.lower():
        return ProviderOutcome.rate_limited(message)
    return ProviderOutcome.malformed(message)


def _finnhub(has_data: Callable[[dict[str, Any]], bool], what: str) -> Classifier:
    """Build a Finnhub classifier around a success-marker check."""

    def classify(body: Any) -> ProviderOutcome:
        if not isinstance(body, dict):
            return ProviderOutcome.malformed(f"Expected an object, got {type(body).__name__}")

        error = _finnhub_error(body)
        if error is not None:
            return error

        if not has_data(body):
            return ProviderOutcome.no_data(f"No {what} in response")

        return ProviderOutcome.success(body)

    return classify


def _finnhub_overview_has_data(body: dict[str, Any]) -> bool:
    profile = body.get("profile")
    metric = body.get("metric")
    has_profile = isinstance(profile, dict) and bool(profile.get("name"))
    has_metric = isinstance(metric, dict) and _non_empty(metric.get("metric"), dict)
    return has_profile or has_metric


def classify_finnhub_overview(body: Any) -> ProviderOutcome:
    """Classify the combined profile/metric body from ``FinnhubClient.overview``.

    A part carrying an ``error`` is replaced by ``{}``, like a part whose
    request failed, so the other half can still be used. The error only
    decides the outcome when no part has data.
    """
    if not isinstance(body, dict):
        return ProviderOutcome.malformed(f"Expected an object, got {type(body).__name__}")

    payload = dict(body)
    errors: list[ProviderOutcome] = []
    for name in ("profile", "metric"):
        part = body.get(name)
        if isinstance(part, dict):
            error = _finnhub_error(part)
            if error is not None:
                errors.append(error)
                payload[name] = {}

    if not _finnhub_overview_has_data(payload):
        if errors:
            return errors[0]
        return ProviderOutcome.no_data("No profile or metrics in response")

    return ProviderOutcome.success(payload)


classify_finnhub_search = _finnhub(
    lambda body: isinstance(body.get("result"), list), "result"
)
classify_finnhub_quote = _finnhub(lambda body: bool(body.get("c")), "price")
classify_finnhub_history = _finnhub(lambda body: body.get("s") == "ok", "candles")
