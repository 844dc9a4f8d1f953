"""
Registration package: contract protocols and the per-domain executor.
"""

from bulk_register.registration.abstract import (
    PendingTransaction,
    Registrar,
    RegistrationRequest,
    Resolver,
)
from bulk_register.registration.executor import attempt_registration, register_domain

__all__ = [
    "PendingTransaction",
    "Registrar",
    "RegistrationRequest",
    "Resolver",
    "attempt_registration",
    "register_domain",
]
