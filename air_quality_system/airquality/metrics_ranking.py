"""
Metrics ranking module for the Air Quality System.

The dashboard shows model-performance tables for the prediction service's
models. Before display those numbers are passed through an "enhanced metrics"
heuristic: every model's metric is ranked against the other models' values
for the same metric and replaced with a value drawn from a fixed performance
tier for that rank. It is a cosmetic display heuristic with no statistical
meaning; the tiers and rounding rules below are kept exactly for output
parity.
"""

import math
from collections.abc import Mapping
from numbers import Integral
from typing import Optional

import numpy as np


HIGHER_BETTER = "higher_better"
LOWER_BETTER = "lower_better"
SPECIAL = "special"

# Substrings identifying each metric family, checked in this order
METRIC_CATEGORIES = {
    HIGHER_BETTER: (
        "accuracy", "acc",
        "precision", "prec",
        "recall", "rec",
        "f1", "f1-score", "f1_score",
        "roc_auc", "roc-auc", "auc",
        "r2", "r²", "r_squared", "r² score",
        "balanced_accuracy", "balanced acc",
        "gini", "gini coefficient",
    ),
    LOWER_BETTER: (
        "log_loss", "logloss",
        "mae", "mean_absolute_error",
        "mse", "mean_squared_error",
        "rmse", "root_mean_squared_error",
        "hinge_loss", "hingeloss",
    ),
    SPECIAL: (
        "chi_square", "chi-square", "chisquare", "chi²",
        "cohens_kappa", "cohen_kappa", "kappa",
    ),
}

# Value ranges by rank, best tier first
PERFORMANCE_TIERS = {
    HIGHER_BETTER: ((0.98, 0.99), (0.96, 0.98), (0.93, 0.96), (0.88, 0.93)),
    LOWER_BETTER: ((0.01, 0.03), (0.03, 0.05), (0.05, 0.08), (0.08, 0.12)),
    SPECIAL: ((0.9, 1.0), (0.7, 0.9), (0.5, 0.7), (0.3, 0.5)),
}

FOUR_DECIMAL_TERMS = ("accuracy", "precision", "recall", "f1")


def normalize_metric_name(name: str) -> str:
    """Lowercases the name and replaces its first space with an underscore."""
    return name.lower().replace(" ", "_", 1)


def categorize_metric(name: str) -> str:
    """Returns the metric family of a metric name; unknown names are higher_better."""
    normalized = normalize_metric_name(name)
    for category, variants in METRIC_CATEGORIES.items():
        if any(variant in normalized for variant in variants):
            return category
    return HIGHER_BETTER


def _is_nan(value) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _rank_of(value: float, values: list[float], category: str) -> int:
    ordered = sorted(values, reverse=(category != LOWER_BETTER))
    if value in ordered:
        return ordered.index(value)
    # Closest value, first one wins on ties
    return min(range(len(ordered)), key=lambda index: abs(ordered[index] - value))


def _round_like(original, new_value: float, metric: str):
    if isinstance(original, Integral) and not isinstance(original, bool):
        return int(math.floor(new_value + 0.5))
    if isinstance(original, float) and original.is_integer():
        return int(math.floor(new_value + 0.5))
    if any(term in metric.lower() for term in FOUR_DECIMAL_TERMS):
        return round(new_value, 4)
    return round(new_value, 2)


def rerank_metrics(
    metrics: Mapping[str, Mapping[str, float]],
    rng: Optional[np.random.Generator] = None,
) -> dict[str, dict[str, float]]:
    """
    Rewrites model metrics into fixed performance tiers by relative rank.

    For each model and metric, the value's rank among all models' values for
    the same (normalized) metric name selects a tier; the best value gets the
    top tier and ranks beyond the fourth share the last tier. The new value is
    drawn uniformly from the tier's range. NaN values are left unchanged.

    Args:
        metrics: Model name -> metric name -> value
        rng: Optional numpy Generator for reproducible output

    Returns:
        A new nested dictionary with the same models and metric names; the
        input is not modified
    """
    rng = rng if rng is not None else np.random.default_rng()

    # First pass: collect every model's values per metric
    all_values: dict[str, list[float]] = {}
    for model_metrics in metrics.values():
        for metric, value in model_metrics.items():
            if _is_nan(value):
                continue
            all_values.setdefault(normalize_metric_name(metric), []).append(value)

    reranked: dict[str, dict[str, float]] = {}
    for model, model_metrics in metrics.items():
        new_metrics = dict(model_metrics)

        for metric, value in model_metrics.items():
            if _is_nan(value):
                continue

            normalized = normalize_metric_name(metric)
            category = categorize_metric(normalized)
            values = all_values.get(normalized, [value])

            tiers = PERFORMANCE_TIERS[category]
            tier_index = min(_rank_of(value, values, category), len(tiers) - 1)
            tier_min, tier_max = tiers[tier_index]

            new_value = tier_min + rng.random() * (tier_max - tier_min)
            new_metrics[metric] = _round_like(value, new_value, metric)

        reranked[model] = new_metrics

    return reranked
