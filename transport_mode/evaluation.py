"""
Evaluation of transportation-mode classifiers.

Builds confusion matrices (actual x predicted counts) from labelled
predictions and derives accuracy, precision, recall and F1 from them. The
matrix is a pandas DataFrame indexed by the actual label with one column per
predicted label, so ``matrix.loc['bus', 'car']`` counts buses taken for cars.

Labels outside the matrix vocabulary (including None) are dropped silently:
a classifier that declines to answer is not scored as wrong.
"""

import time
import numpy as np
import pandas as pd
from collections import Counter
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence
from dataclasses import dataclass
from enum import Enum

from .classifier import (
    TRANSPORT_MODES,
    RouteType,
    SpeedClass,
    TransportMode,
    TransportModeClassifier,
    automotive_transport_mode,
)
from .config import ClassifierConfig
from .log import get_logger
from .trajectory import MS_TO_KMH, known_speeds, to_trajectory_frame

logger = get_logger(__name__)


@dataclass
class ComparisonResult:
    """Scores of one classifier over a labelled dataset."""
    name: str
    description: str
    predictions: List[Optional[str]]
    confusion_matrix: pd.DataFrame
    accuracy: float
    report: pd.DataFrame
    coverage: float  # fraction of applicable trajectories that got a label
    processing_time: float  # seconds


def _label(value: Any) -> Optional[str]:
    if isinstance(value, Enum):
        return value.value
    return value


def _pair(item: Any):
    if isinstance(item, Mapping):
        return _label(item.get('actual')), _label(item.get('predicted'))
    actual, predicted = item
    return _label(actual), _label(predicted)


def build_confusion_matrix(
    pairs: Iterable[Any],
    labels: Optional[Sequence[Any]] = None,
) -> pd.DataFrame:
    """
    Build a confusion matrix from (actual, predicted) pairs.

    Args:
        pairs: (actual, predicted) tuples or dicts with 'actual'/'predicted'
        labels: Matrix vocabulary; defaults to the five transport modes

    Returns:
        Integer DataFrame, index 'actual', columns 'predicted'
    """
    vocab = [_label(label) for label in (labels if labels is not None else TRANSPORT_MODES)]
    known = set(vocab)

    counts = Counter()
    for item in pairs:
        actual, predicted = _pair(item)
        if actual in known and predicted in known:
            counts[(actual, predicted)] += 1

    values = np.zeros((len(vocab), len(vocab)), dtype=int)
    for i, actual in enumerate(vocab):
        for j, predicted in enumerate(vocab):
            values[i, j] = counts[(actual, predicted)]

    return pd.DataFrame(
        values,
        index=pd.Index(vocab, name='actual'),
        columns=pd.Index(vocab, name='predicted'),
    )


def accuracy(matrix: pd.DataFrame) -> float:
    """Fraction of counts on the diagonal; 0 for an empty matrix."""
    total = matrix.values.sum()
    if total == 0:
        return 0.0
    correct = sum(matrix.loc[label, label] for label in matrix.index if label in matrix.columns)
    return float(correct / total)


def precision(matrix: pd.DataFrame, label: Any) -> float:
    """Correct predictions of ``label`` over all predictions of it; 0 if never predicted."""
    label = _label(label)
    if label not in matrix.columns:
        return 0.0
    predicted = matrix[label].sum()
    if predicted == 0:
        return 0.0
    true_positives = matrix.loc[label, label] if label in matrix.index else 0
    return float(true_positives / predicted)


def recall(matrix: pd.DataFrame, label: Any) -> float:
    """Correct predictions of ``label`` over all actual occurrences; 0 if it never occurs."""
    label = _label(label)
    if label not in matrix.index:
        return 0.0
    actual = matrix.loc[label].sum()
    if actual == 0:
        return 0.0
    true_positives = matrix.loc[label, label] if label in matrix.columns else 0
    return float(true_positives / actual)


def f1_score(p: float, r: float) -> float:
    """Harmonic mean of precision and recall; 0 when both are 0."""
    if p + r == 0:
        return 0.0
    return 2 * p * r / (p + r)


def classification_report(matrix: pd.DataFrame) -> pd.DataFrame:
    """
    Per-label precision, recall, F1 and support.

    Args:
        matrix: Confusion matrix from build_confusion_matrix

    Returns:
        DataFrame indexed by label
    """
    rows = []
    for label in matrix.index:
        p = precision(matrix, label)
        r = recall(matrix, label)
        rows.append({
            'label': label,
            'precision': p,
            'recall': r,
            'f1': f1_score(p, r),
            'support': int(matrix.loc[label].sum()),
        })
    return pd.DataFrame(rows).set_index('label')


# Ground truth projected into each classifier's own vocabulary; None means
# the classifier is not expected to answer for that mode.
_SPEED_TRUTH = {
    'walking': 'walking',
    'cycling': 'cycling',
    'bus': 'bus-or-car',
    'car': 'bus-or-car',
    'train': 'train',
}
_STOP_TRUTH = {'bus': 'bus', 'car': 'car'}
_ROUTE_TRUTH = {'train': 'fixed-route', 'bus': 'fixed-route', 'car': 'variable-route'}


def _resolve_truth(df: pd.DataFrame, label: Optional[str]) -> Optional[str]:
    """
    Replace a sensor 'automotive' label by bus, car or train.

    Each fix is labelled from its own speed and the trajectory takes the
    most common label; None when no fix reports a speed.
    """
    if label != 'automotive':
        return label
    speeds = known_speeds(df)
    if len(speeds) == 0:
        return None
    votes = Counter(automotive_transport_mode(s / MS_TO_KMH).value for s in speeds)
    return votes.most_common(1)[0][0]


def _algorithms(classifier: TransportModeClassifier):
    """(name, description, predict, truth projection, vocabulary) per classifier."""
    speed_vocab = [c.value for c in SpeedClass]
    return [
        ('baseline', 'Maximum speed against fixed thresholds',
         classifier.baseline, _SPEED_TRUTH.get, speed_vocab),
        ('percentile95', '95th percentile speed against fixed thresholds',
         classifier.percentile95, _SPEED_TRUTH.get, speed_vocab),
        ('stop_pattern', 'Stop frequency and spacing (bus vs. car)',
         classifier.stop_pattern, _STOP_TRUTH.get, [TransportMode.BUS.value, TransportMode.CAR.value]),
        ('heading_change', 'Heading-change variance (fixed vs. variable route)',
         classifier.heading_change, _ROUTE_TRUTH.get, [r.value for r in RouteType]),
        ('combined', 'Percentile95 with bus-or-car resolved by stop pattern',
         lambda df: classifier.classify(df).mode,
         lambda mode: mode if mode in TRANSPORT_MODES else None, TRANSPORT_MODES),
    ]


def _evaluate(
    name: str,
    description: str,
    predict: Callable,
    project: Callable,
    vocab: List[str],
    frames: List[pd.DataFrame],
    truth: List[Optional[str]],
) -> ComparisonResult:
    predictions: List[Optional[str]] = []
    pairs = []
    applicable = 0
    answered = 0

    start = time.perf_counter()
    for df, actual in zip(frames, truth):
        predicted = _label(predict(df))
        predictions.append(predicted)

        expected = project(actual) if actual is not None else None
        if expected is None:
            continue
        applicable += 1
        if predicted is not None:
            answered += 1
            pairs.append((expected, predicted))
    elapsed = time.perf_counter() - start

    matrix = build_confusion_matrix(pairs, vocab)
    coverage = answered / applicable if applicable > 0 else 0.0

    logger.debug(f"{name}: {answered}/{applicable} scored in {elapsed:.3f}s")

    return ComparisonResult(
        name=name,
        description=description,
        predictions=predictions,
        confusion_matrix=matrix,
        accuracy=accuracy(matrix),
        report=classification_report(matrix),
        coverage=coverage,
        processing_time=elapsed,
    )


def compare_classifiers(
    trajectories: Sequence[Any],
    truth: Sequence[Any],
    config: Optional[ClassifierConfig] = None,
) -> Dict[str, ComparisonResult]:
    """
    Score every classifier against labelled trajectories.

    Each classifier is judged in its own vocabulary: speed classifiers
    against bus/car merged into bus-or-car, the stop-pattern classifier on
    bus and car trajectories only, the heading classifier on train/bus
    (fixed route) and car (variable route) trajectories only. A sensor
    'automotive' label is split into bus, car or train by speed first.

    Args:
        trajectories: DataFrames or sample iterables
        truth: Transport mode per trajectory (TransportMode or string)
        config: Optional thresholds

    Returns:
        Dict of ComparisonResult keyed by classifier name
    """
    if len(trajectories) != len(truth):
        raise ValueError(
            f"Got {len(trajectories)} trajectories but {len(truth)} ground-truth labels"
        )

    logger.info(f"Comparing classifiers on {len(trajectories)} trajectories")

    frames = [to_trajectory_frame(t) for t in trajectories]
    labels = [_resolve_truth(df, _label(t)) for df, t in zip(frames, truth)]
    classifier = TransportModeClassifier(config)

    results = {}
    for name, description, predict, project, vocab in _algorithms(classifier):
        results[name] = _evaluate(name, description, predict, project, vocab, frames, labels)
        logger.info(
            f"{name}: accuracy {results[name].accuracy:.2f}, "
            f"coverage {results[name].coverage:.2f}"
        )

    return results


def comparison_summary(results: Dict[str, ComparisonResult]) -> pd.DataFrame:
    """One row per classifier with accuracy, macro F1, coverage and time."""
    return pd.DataFrame([
        {
            'classifier': r.name,
            'accuracy': r.accuracy,
            'macro_f1': float(r.report['f1'].mean()) if len(r.report) > 0 else 0.0,
            'coverage': r.coverage,
            'processing_time': r.processing_time,
        }
        for r in results.values()
    ]).set_index('classifier')
