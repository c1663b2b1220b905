"""
Retention policy.

Keeps the newest ``max_models_to_keep`` artifacts per language and deletes
the rest. Deletions are issued concurrently and independently: a failed
deletion is recorded and never aborts the others. There is no rollback.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from model_store.config.settings import StoreConfig, get_config
from model_store.errors import PruneFailure
from model_store.storage.backends.base import StorageBackend
from model_store.storage.naming import list_models_for_lang

logger = logging.getLogger(__name__)


@dataclass
class PruneReport:
    """Outcome of a retention pass for one language."""

    language_code: str
    kept: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    failures: list[PruneFailure] = field(default_factory=list)
    error: str | None = None  # Set when the listing itself failed

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failures

    def to_summary(self) -> str:
        """Generate human-readable summary."""
        if self.error:
            return f"Prune '{self.language_code}' skipped: {self.error}"
        lines = [
            f"Prune '{self.language_code}': kept {len(self.kept)}, deleted {len(self.deleted)}"
        ]
        for failure in self.failures:
            lines.append(f"  ! {failure}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "language_code": self.language_code,
            "kept": list(self.kept),
            "deleted": list(self.deleted),
            "failures": [{"name": f.name, "reason": f.reason} for f in self.failures],
            "error": self.error,
        }


def select_models_to_prune(names: list[str], keep: int) -> list[str]:
    """Return the names beyond the first *keep* of a newest-first listing."""
    if keep < 1:
        raise ValueError("keep must be at least 1")
    return names[keep:]


async def prune_models(
    backend: StorageBackend,
    language_code: str,
    config: StoreConfig | None = None,
    keep: int | None = None,
) -> PruneReport:
    """Delete all but the newest *keep* artifacts of *language_code*.

    Args:
        backend: Storage backend to prune
        language_code: Language whose artifacts are pruned
        config: Store configuration (directory, default bound)
        keep: Override for ``config.max_models_to_keep``

    Returns:
        PruneReport listing kept, deleted and failed names

    Raises:
        BackendReadError: If the listing fails (nothing is deleted then)
    """
    config = config or get_config()
    keep = config.max_models_to_keep if keep is None else keep

    names = await list_models_for_lang(backend, language_code, config)
    doomed = select_models_to_prune(names, keep)
    report = PruneReport(language_code=language_code, kept=names[:keep])
    if not doomed:
        return report

    results = await asyncio.gather(
        *(backend.delete_file(config.models_dir, name) for name in doomed),
        return_exceptions=True,
    )
    for name, result in zip(doomed, results):
        if isinstance(result, BaseException):
            failure = PruneFailure(name, str(result) or type(result).__name__)
            logger.warning("Prune failure for '%s': %s", language_code, failure)
            report.failures.append(failure)
        else:
            logger.info("Pruned model %s", name)
            report.deleted.append(name)
    return report
