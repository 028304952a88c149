"""Compressed size budgets for named build-output chunks."""

from __future__ import annotations

import gzip
import re

from policy_gate.core.loader import load_bundle_budgets
from policy_gate.core.report import format_number
from policy_gate.core.scope import FileSource
from policy_gate.models.common import Status
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.config import BundleSettings
from policy_gate.utils.errors import MissingArtifactError
from policy_gate.utils.logging import get_logger

logger = get_logger("checks.bundle")


def gzip_size(data: bytes, level: int = 9) -> int:
    """Compressed size in bytes; a zero mtime keeps the result deterministic."""
    return len(gzip.compress(data, compresslevel=level, mtime=0))


def to_kb(size_bytes: int) -> float:
    return round(size_bytes / 1024, 2)


def find_chunk(source: FileSource, assets_dir: str, pattern: str, label: str) -> str:
    """Name of the first output file (sorted) matching a chunk pattern.

    Raises:
        MissingArtifactError: If the output directory or the chunk is missing
    """
    if not source.is_dir(assets_dir):
        raise MissingArtifactError(f"{assets_dir} not found. Run the production build first.", path=assets_dir)
    regex = re.compile(pattern)
    for name in sorted(source.list_dir(assets_dir)):
        if regex.search(name) and not source.is_dir(f"{assets_dir}/{name}"):
            return name
    raise MissingArtifactError(f"Unable to find {label} chunk in {assets_dir}", path=assets_dir)


def check_bundle_budgets(
    source: FileSource,
    settings: BundleSettings,
    report_only: bool = False,
) -> CheckResult:
    """Measure every configured chunk and compare against its budget."""
    budgets = load_bundle_budgets(
        source, settings.budgets_path, [chunk.budget_key for chunk in settings.chunks]
    )

    names: dict[str, str] = {}
    measured: dict[str, float] = {}
    for chunk in settings.chunks:
        name = find_chunk(source, settings.assets_dir, chunk.pattern, chunk.label)
        names[chunk.budget_key] = name
        measured[chunk.budget_key] = to_kb(
            gzip_size(source.read_bytes(f"{settings.assets_dir}/{name}"), settings.compression_level)
        )
        logger.debug(f"{chunk.label}: {name} -> {measured[chunk.budget_key]}kB")

    items: list[CheckItem] = []
    for chunk in settings.chunks:
        actual = measured[chunk.budget_key]
        budget = budgets.budgets_kb[chunk.budget_key]
        items.append(
            CheckItem(
                status=Status.PASS if actual <= budget else Status.FAIL,
                message=f"{chunk.label} chunk gzip: {format_number(actual)}kB (budget {format_number(budget)}kB)",
                path=f"{settings.assets_dir}/{names[chunk.budget_key]}",
                rule_id=chunk.budget_key,
            )
        )

    return CheckResult(
        check="bundle-budgets",
        title="Bundle size budgets",
        policy=dict(budgets.budgets_kb),
        measured=measured,
        details={"chunks": names, "compressionLevel": settings.compression_level},
        items=items,
        report_only=report_only,
    )
