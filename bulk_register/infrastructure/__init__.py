"""
Infrastructure package for bulk domain registration.

Centralizes I/O concerns: the progress file, the input CSV, deployment metadata
and the web3 contract adapters. Keep this layer decoupled from batch logic.
"""

from bulk_register.infrastructure.csv_source import load_candidates
from bulk_register.infrastructure.deployments import Deployment, load_deployment
from bulk_register.infrastructure.record_store import RecordStore
from bulk_register.infrastructure.revert import decode_revert_reason

__all__ = [
    "Deployment",
    "RecordStore",
    "decode_revert_reason",
    "load_candidates",
    "load_deployment",
]
