"""
Domain models — Pydantic types for hostctl.

All models are re-exported here for convenient access:

    from hostctl.core.models import Action, Receipt, HostConfig, ServiceAction
"""

from hostctl.core.models.action import Action, Receipt
from hostctl.core.models.config import (
    GitSettings,
    HostConfig,
    NixSettings,
    ServiceSettings,
    TerminalSettings,
)
from hostctl.core.models.service import (
    PipelineOutcome,
    PipelineResult,
    PipelineStage,
    ServiceAction,
    is_affirmative,
)

__all__ = [
    # action.py
    "Action",
    # config.py
    "GitSettings",
    "HostConfig",
    "NixSettings",
    # service.py
    "PipelineOutcome",
    "PipelineResult",
    "PipelineStage",
    "Receipt",
    "ServiceAction",
    "ServiceSettings",
    "TerminalSettings",
    "is_affirmative",
]
