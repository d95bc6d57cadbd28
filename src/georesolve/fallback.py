"""
Ordered provider fallback.

``first_success`` tries interchangeable providers one after the other and
stops at the first usable answer. Provider failures and missing credentials
are recorded and logged, never raised; anything else propagates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, List, Optional, TypeVar

from .errors import ProviderError, ProviderUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = TypeVar("P")

OK = "ok"
SKIPPED = "skipped"
FAILED = "failed"
REJECTED = "rejected"


@dataclass
class Attempt:
    """One provider attempt within a fallback chain."""

    provider: str
    status: str
    reason: Optional[str] = None


@dataclass
class FallbackOutcome(Generic[T]):
    """Result of a fallback chain."""

    value: Optional[T] = None
    """First accepted result, or None if every provider failed."""

    provider: Optional[str] = None
    """Name of the provider that produced ``value``."""

    attempts: List[Attempt] = field(default_factory=list)
    """Every attempt in the order it was made."""

    @property
    def found(self) -> bool:
        return self.value is not None


def first_success(
    providers: Iterable[P],
    call: Callable[[P], Optional[T]],
    *,
    accept: Optional[Callable[[T], bool]] = None,
    subject: str = "",
    verbose: bool = False,
    log: Optional[logging.Logger] = None,
) -> FallbackOutcome[T]:
    """
    Return the first result of ``call(provider)`` that ``accept`` approves.

    Args:
        providers: Providers in the order they should be tried
        call: Performs the request against one provider
        accept: Optional check; results it rejects count as misses
        subject: What is being resolved, used in log messages
        verbose: Log progress at INFO instead of DEBUG
        log: Logger to use (defaults to this module's)

    Returns:
        FallbackOutcome with the winning value and every attempt made
    """
    log = log or logger
    level = logging.INFO if verbose else logging.DEBUG
    outcome: FallbackOutcome[T] = FallbackOutcome()

    for provider in providers:
        name = getattr(provider, "name", type(provider).__name__)

        is_available = getattr(provider, "is_available", None)
        if is_available is not None and not is_available():
            reason = f"missing credential for '{getattr(provider, 'service_id', name)}'"
            log.warning(f"Skipping {name}: {reason}")
            outcome.attempts.append(Attempt(name, SKIPPED, reason))
            continue

        log.log(level, f"Using {name} for {subject}")
        try:
            result = call(provider)
        except ProviderUnavailable as exc:
            log.warning(f"Skipping {name}: {exc}")
            outcome.attempts.append(Attempt(name, SKIPPED, str(exc)))
            continue
        except ProviderError as exc:
            log.warning(f"Could not resolve {subject} using {name}: {exc}")
            outcome.attempts.append(Attempt(name, FAILED, str(exc)))
            continue

        if result is None:
            log.warning(f"Could not resolve {subject} using {name}: no result")
            outcome.attempts.append(Attempt(name, FAILED, "no result"))
            continue

        if accept is not None and not accept(result):
            log.warning(f"Discarding result of {name} for {subject}: outside plausible area")
            outcome.attempts.append(Attempt(name, REJECTED, "outside plausible area"))
            continue

        outcome.attempts.append(Attempt(name, OK))
        outcome.value = result
        outcome.provider = name
        return outcome

    return outcome
