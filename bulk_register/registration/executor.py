"""
Registration executor: one `ownerRegister` transaction per domain.

`register_domain` never raises for per-domain problems. Estimation, submission,
confirmation failures and reverts all come back as a `Failed` outcome so the batch
can move on. `attempt_registration` optionally repeats retryable failures within
the same run.

Known gap: registration and bookkeeping are not atomic. If the process dies after
the receipt arrives but before the caller persists `Success`, the next run submits
the same registration again and relies on the registrar rejecting names that are
already taken.
"""

from __future__ import annotations

from ens import ENS
from tenacity import RetryCallState, Retrying, retry_if_result, stop_after_attempt, wait_exponential

from bulk_register.domain.models import DomainStatus, RegistrationOutcome
from bulk_register.errors import RegistrationError
from bulk_register.infrastructure.revert import decode_revert_reason
from bulk_register.registration.abstract import Registrar, RegistrationRequest, Resolver
from bulk_register.utils.logging import get_logger

log = get_logger(__name__)

DURATION_SECONDS = 365 * 99 * 24 * 60 * 60  # 99 years
OWNER_CONTROLLED_FUSES = 0  # no restrictions
REVERSE_RECORD = True
PARENT_TLD = "eth"


def qualified_name(domain: str, base_domain: str) -> str:
    return f"{domain}.{base_domain}.{PARENT_TLD}"


def namehash(name: str) -> bytes:
    """EIP-137 namehash of a fully-qualified name."""
    return bytes(ENS.namehash(name))


def build_request(domain: str, owner: str, resolver: Resolver, base_domain: str) -> RegistrationRequest:
    """Build the `ownerRegister` arguments, including the `setAddr` resolver call."""
    node = namehash(qualified_name(domain, base_domain))
    data = [resolver.encode_set_addr(node, owner)]
    log.debug(f"Data for {domain}: {data}", extra={"domain": domain})
    return RegistrationRequest(
        name=domain,
        owner=owner,
        duration=DURATION_SECONDS,
        resolver=resolver.address,
        data=data,
        owner_controlled_fuses=OWNER_CONTROLLED_FUSES,
        reverse_record=REVERSE_RECORD,
    )


def _failure(domain: str, exc: Exception) -> RegistrationOutcome:
    reason = decode_revert_reason(exc)
    detail = f"{type(exc).__name__}: {exc}"
    if reason:
        detail = f"{detail} (revert reason: {reason})"
    retryable = exc.retryable if isinstance(exc, RegistrationError) else False
    log.error(
        f"Failed to register domain {domain}: {detail}",
        extra={"domain": domain, "error_type": type(exc).__name__},
    )
    if reason:
        log.error(f"Revert reason: {reason}", extra={"domain": domain, "revert_reason": reason})
    return RegistrationOutcome.failed(detail, revert_reason=reason, retryable=retryable)


def register_domain(
    domain: str,
    owner: str,
    registrar: Registrar,
    resolver: Resolver,
    *,
    base_domain: str,
) -> RegistrationOutcome:
    """
    Register `domain` to `owner` and wait for confirmation.

    Returns
    -------
    RegistrationOutcome
        `Success` once the transaction is mined, otherwise `Failed` with the error
        detail and, when the node supplied one, the decoded revert reason.
    """
    try:
        request = build_request(domain, owner, resolver, base_domain)
        gas_limit = registrar.estimate_gas(request)
        log.info(
            f"Estimated gas limit for {domain}: {gas_limit}",
            extra={"domain": domain, "gas_limit": gas_limit},
        )
        pending = registrar.submit(request, gas_limit=gas_limit)
        log.info(
            f"Submitted registration for {domain}: {pending.tx_hash}",
            extra={"domain": domain, "tx_hash": pending.tx_hash},
        )
        pending.wait()
    except Exception as exc:  # noqa: BLE001 - every per-domain failure is recorded, not raised
        return _failure(domain, exc)

    log.info(f"Domain {domain} registered successfully.", extra={"domain": domain})
    return RegistrationOutcome.success()


def _should_retry(outcome: RegistrationOutcome) -> bool:
    return outcome.status is DomainStatus.FAILED and outcome.retryable


def _log_retry(retry_state: RetryCallState) -> None:
    domain = retry_state.args[0] if retry_state.args else "?"
    log.warning(
        f"[RETRY] Attempt {retry_state.attempt_number} for {domain} failed, retrying",
        extra={"domain": domain, "attempt": retry_state.attempt_number},
    )


def attempt_registration(
    domain: str,
    owner: str,
    registrar: Registrar,
    resolver: Resolver,
    *,
    base_domain: str,
    max_attempts: int = 1,
    backoff_seconds: float = 0.0,
) -> RegistrationOutcome:
    """
    Run `register_domain` up to `max_attempts` times.

    Only retryable failures are repeated (a mined revert is final). The last
    outcome is returned either way; nothing is raised.
    """
    retrying = Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=backoff_seconds, max=60),
        retry=retry_if_result(_should_retry),
        retry_error_callback=lambda state: state.outcome.result(),
        before_sleep=_log_retry,
    )
    return retrying(
        register_domain, domain, owner, registrar, resolver, base_domain=base_domain
    )


__all__ = [
    "DURATION_SECONDS",
    "OWNER_CONTROLLED_FUSES",
    "REVERSE_RECORD",
    "qualified_name",
    "namehash",
    "build_request",
    "register_domain",
    "attempt_registration",
]
