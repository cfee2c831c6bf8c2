"""BaseService — shared construction for vaultport services.

Every service receives the resolved configuration and the per-run state.
Components built from the same state share its memo caches.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from vaultport.config.models import VaultportConfig
from vaultport.services.state import RunState

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


class BaseService:
    """Abstract base for service-layer classes.

    Usage::

        class ConvertService(BaseService):
            def convert(self, vault_path: Path, output_path: Path) -> ServiceResult:
                ...
    """

    def __init__(
        self,
        config: VaultportConfig | None = None,
        state: RunState | None = None,
    ) -> None:
        self._config = config or VaultportConfig()
        self._state = state or RunState()
        self._log: BoundLogger = structlog.get_logger(type(self).__module__)

    @property
    def state(self) -> RunState:
        return self._state

    def _warn(self, warnings: list[str], message: str, **fields: Any) -> None:
        """Record a recoverable problem: logged and surfaced on the result."""
        self._log.warning(message, **fields)
        detail = ", ".join(f"{k}={v}" for k, v in fields.items())
        warnings.append(f"{message} ({detail})" if detail else message)
