"""Runtime configuration for the questionnaire engine."""

import functools
import typing as t
from dataclasses import dataclass, field

from django.conf import settings


@dataclass(frozen=True)
class CoreConfig:
    """Engine configuration, built once from ``settings.SURVEYHUB`` and injected into services.

    Attributes:
        default_page_size: Page size used when the caller's value is missing or out of range.
        max_page_size: Largest page size accepted before falling back to the default.
        transient_retry_attempts: Total attempts for a write hitting a transient store error.
        transient_retry_backoff: Seconds to wait after the first failure; grows linearly.
        recent_submissions_days: Trailing window used by the "recent submissions" statistic.
        credential_verifier: Dotted path of the class that verifies bearer credentials.
    """

    default_page_size: int = 10
    max_page_size: int = 100
    transient_retry_attempts: int = 3
    transient_retry_backoff: float = 0.05
    recent_submissions_days: int = 7
    credential_verifier: str = "accounts.guard.JWTCredentialVerifier"
    extra: dict[str, t.Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        """Reject configurations the engine cannot honor."""
        if self.default_page_size < 1 or self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size must be within [1, max_page_size]")
        if self.transient_retry_attempts < 1:
            raise ValueError("transient_retry_attempts must be at least 1")

    @classmethod
    def from_settings(cls) -> "CoreConfig":
        """Build the config from the SURVEYHUB settings dict."""
        raw: dict[str, t.Any] = dict(getattr(settings, "SURVEYHUB", {}))
        return cls(
            default_page_size=raw.pop("DEFAULT_PAGE_SIZE", cls.default_page_size),
            max_page_size=raw.pop("MAX_PAGE_SIZE", cls.max_page_size),
            transient_retry_attempts=raw.pop("TRANSIENT_RETRY_ATTEMPTS", cls.transient_retry_attempts),
            transient_retry_backoff=raw.pop("TRANSIENT_RETRY_BACKOFF_SECONDS", cls.transient_retry_backoff),
            recent_submissions_days=raw.pop("RECENT_SUBMISSIONS_DAYS", cls.recent_submissions_days),
            credential_verifier=raw.pop("CREDENTIAL_VERIFIER", cls.credential_verifier),
            extra=raw,
        )


@functools.lru_cache(maxsize=1)
def get_core_config() -> CoreConfig:
    """Return the process-wide config, built on first use."""
    return CoreConfig.from_settings()
