from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List

from spotcast.core.metrics import compute_fold_metrics
from spotcast.core.stats import round2
from spotcast.core.types import FoldResult, PricePoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BacktestConfig:
    folds: int = 4
    min_points: int = 12  # below this, no split is meaningful
    min_fold_size: int = 2


def perform_time_series_cv(
    points: Iterable[PricePoint],
    cfg: BacktestConfig = BacktestConfig(),
) -> List[FoldResult]:
    """
    Forward-chaining (expanding window) evaluation over historical points.

    The scored history is cut into folds + 1 blocks of fold_size. Fold i
    trains on blocks [0, i) and tests on block i. Records past
    (folds + 1) * fold_size are not scored. Order is never shuffled.
    """
    historical = [p for p in points if p.actual_price is not None and not p.is_future]
    total = len(historical)
    if total < cfg.min_points:
        logger.debug("perform_time_series_cv: %d scored points < %d, no folds", total, cfg.min_points)
        return []

    fold_size = total // (cfg.folds + 1)
    if fold_size < cfg.min_fold_size:
        return []

    results: List[FoldResult] = []
    for i in range(1, cfg.folds + 1):
        train_end = i * fold_size
        test_end = min(total, (i + 1) * fold_size)
        test_slice = historical[train_end:test_end]

        m = compute_fold_metrics(test_slice)
        results.append(
            FoldResult(
                fold=i,
                train_size=train_end,
                test_size=len(test_slice),
                mae=round2(m.mae),
                rmse=round2(m.rmse),
            )
        )

    return results
