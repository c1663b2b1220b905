"""Tests for the retention policy."""

from __future__ import annotations

import pytest
from conftest import FlakyBackend

from model_store.config.settings import StoreConfig
from model_store.errors import BackendReadError
from model_store.storage.retention import PruneReport, prune_models, select_models_to_prune

CONFIG = StoreConfig()


async def _seed(backend, language_code: str, *hashes: str) -> None:
    """Write placeholder artifacts, oldest first."""
    for content_hash in hashes:
        await backend.upsert_file(CONFIG.models_dir, f"{content_hash}.{language_code}.model", b"x")


class TestSelectModelsToPrune:
    """Tests for the pure selection rule."""

    @pytest.mark.parametrize(
        ("names", "keep", "expected"),
        [
            ([], 2, []),
            (["a"], 2, []),
            (["a", "b"], 2, []),
            (["a", "b", "c"], 2, ["c"]),
            (["a", "b", "c", "d"], 1, ["b", "c", "d"]),
        ],
    )
    def test_selection(self, names, keep, expected):
        """Everything beyond the first *keep* names is selected."""
        assert select_models_to_prune(names, keep) == expected

    def test_keep_must_be_positive(self):
        """Keeping zero models is rejected."""
        with pytest.raises(ValueError):
            select_models_to_prune(["a"], 0)


class TestPruneModels:
    """Tests for prune_models."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [0, 1, 2])
    async def test_noop_within_bound(self, memory_backend, count):
        """Zero, one or exactly MAX models are left alone."""
        await _seed(memory_backend, "en", *[f"h{i}" for i in range(count)])

        report = await prune_models(memory_backend, "en", CONFIG)

        assert report.deleted == []
        assert report.ok
        assert len(report.kept) == count

    @pytest.mark.asyncio
    async def test_deletes_oldest(self, memory_backend):
        """Only the newest MAX models survive."""
        await _seed(memory_backend, "en", "h1", "h2", "h3", "h4")

        report = await prune_models(memory_backend, "en", CONFIG)

        assert report.kept == ["h4.en.model", "h3.en.model"]
        assert sorted(report.deleted) == ["h1.en.model", "h2.en.model"]
        remaining = await memory_backend.directory_listing(CONFIG.models_dir)
        assert sorted(remaining) == ["h3.en.model", "h4.en.model"]

    @pytest.mark.asyncio
    async def test_other_languages_untouched(self, memory_backend):
        """Pruning one language never deletes another's models."""
        await _seed(memory_backend, "fr", "f1", "f2", "f3")
        await _seed(memory_backend, "en", "h1", "h2", "h3")

        await prune_models(memory_backend, "en", CONFIG)

        remaining = await memory_backend.directory_listing(CONFIG.models_dir, "*.fr.model")
        assert len(remaining) == 3

    @pytest.mark.asyncio
    async def test_keep_override(self, memory_backend):
        """An explicit keep overrides the configured bound."""
        await _seed(memory_backend, "en", "h1", "h2", "h3")

        report = await prune_models(memory_backend, "en", CONFIG, keep=1)

        assert report.kept == ["h3.en.model"]
        assert len(report.deleted) == 2

    @pytest.mark.asyncio
    async def test_failed_deletion_does_not_abort_others(self):
        """Every deletion is attempted; failures are reported."""
        backend = FlakyBackend(fail_deletes=["h2.en.model"])
        await _seed(backend, "en", "h1", "h2", "h3", "h4", "h5")

        report = await prune_models(backend, "en", CONFIG)

        assert sorted(backend.delete_calls) == ["h1.en.model", "h2.en.model", "h3.en.model"]
        assert sorted(report.deleted) == ["h1.en.model", "h3.en.model"]
        assert [f.name for f in report.failures] == ["h2.en.model"]
        assert "cannot delete" in report.failures[0].reason
        assert not report.ok

    @pytest.mark.asyncio
    async def test_listing_failure_raises(self):
        """Without a listing nothing can be pruned."""
        backend = FlakyBackend(fail_listing=True)

        with pytest.raises(BackendReadError):
            await prune_models(backend, "en", CONFIG)


class TestPruneReport:
    """Tests for PruneReport."""

    def test_summary_and_dict(self):
        """Report renders failures and serializes."""
        from model_store.errors import PruneFailure

        report = PruneReport(
            language_code="en",
            kept=["a.en.model"],
            deleted=["b.en.model"],
            failures=[PruneFailure("c.en.model", "locked")],
        )

        assert "kept 1, deleted 1" in report.to_summary()
        assert "c.en.model" in report.to_summary()
        assert report.to_dict()["failures"] == [{"name": "c.en.model", "reason": "locked"}]

    def test_error_summary(self):
        """A skipped prune says why."""
        report = PruneReport(language_code="en", error="listing unavailable")
        assert not report.ok
        assert "skipped" in report.to_summary()
