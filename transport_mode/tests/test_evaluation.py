"""
Tests for confusion matrices and classifier metrics.
"""

import numpy as np
import pandas as pd
import pytest

import sys
sys.path.insert(0, str(__file__).rsplit('/', 3)[0])

from transport_mode import (
    accuracy,
    build_confusion_matrix,
    compare_classifiers,
    f1_score,
    generate_trajectory_dataset,
    precision,
    recall,
    TransportMode,
)
from transport_mode.evaluation import classification_report, comparison_summary


class TestConfusionMatrix:
    """Tests for confusion matrix construction."""

    def test_counts(self):
        pairs = [
            ('walking', 'walking'),
            ('walking', 'walking'),
            ('cycling', 'cycling'),
            ('bus', 'car'),
        ]
        matrix = build_confusion_matrix(pairs)

        assert matrix.loc['walking', 'walking'] == 2
        assert matrix.loc['cycling', 'cycling'] == 1
        assert matrix.loc['bus', 'car'] == 1
        assert matrix.values.sum() == len(pairs)
        assert accuracy(matrix) == 0.75

    def test_all_cells_initialised(self):
        matrix = build_confusion_matrix([])

        assert list(matrix.index) == ['walking', 'cycling', 'bus', 'car', 'train']
        assert list(matrix.columns) == list(matrix.index)
        assert matrix.values.sum() == 0

    def test_dict_pairs_and_enum_labels(self):
        pairs = [
            {'actual': 'car', 'predicted': 'car'},
            {'actual': TransportMode.TRAIN, 'predicted': TransportMode.BUS},
        ]
        matrix = build_confusion_matrix(pairs)

        assert matrix.loc['car', 'car'] == 1
        assert matrix.loc['train', 'bus'] == 1

    def test_out_of_vocabulary_ignored(self):
        pairs = [
            ('walking', 'stationary'),
            ('unknown', 'car'),
            (None, 'car'),
            ('bus', None),
        ]
        matrix = build_confusion_matrix(pairs)
        assert matrix.values.sum() == 0

    def test_custom_vocabulary(self):
        matrix = build_confusion_matrix(
            [('fixed-route', 'uncertain'), ('fixed-route', 'fixed-route')],
            labels=['fixed-route', 'variable-route', 'uncertain'],
        )
        assert matrix.shape == (3, 3)
        assert matrix.loc['fixed-route', 'uncertain'] == 1
        assert accuracy(matrix) == 0.5

    def test_fresh_matrix_per_call(self):
        first = build_confusion_matrix([('car', 'car')])
        second = build_confusion_matrix([('car', 'car')])
        second.loc['car', 'car'] += 1

        assert first.loc['car', 'car'] == 1


class TestMetrics:
    """Tests for accuracy, precision, recall and F1."""

    def test_accuracy(self):
        pairs = [
            ('walking', 'walking'),
            ('cycling', 'cycling'),
            ('bus', 'car'),
            ('car', 'car'),
            ('train', 'train'),
        ]
        assert accuracy(build_confusion_matrix(pairs)) == pytest.approx(0.8)

    def test_accuracy_empty(self):
        assert accuracy(build_confusion_matrix([])) == 0

    def test_precision(self):
        """Walking predicted 3 times, correct twice."""
        matrix = build_confusion_matrix([
            ('walking', 'walking'),
            ('walking', 'walking'),
            ('cycling', 'walking'),
        ])
        assert precision(matrix, 'walking') == pytest.approx(2 / 3)

    def test_recall(self):
        """Walking occurs twice, recognised once."""
        matrix = build_confusion_matrix([
            ('walking', 'walking'),
            ('walking', 'cycling'),
            ('cycling', 'cycling'),
        ])
        assert recall(matrix, 'walking') == 0.5
        assert recall(matrix, TransportMode.CYCLING) == 1.0

    def test_f1(self):
        matrix = build_confusion_matrix([
            ('walking', 'walking'),
            ('walking', 'cycling'),
            ('cycling', 'cycling'),
        ])
        p = precision(matrix, 'walking')
        r = recall(matrix, 'walking')
        assert f1_score(p, r) == pytest.approx(2 / 3)

    def test_zero_denominators(self):
        matrix = build_confusion_matrix([('walking', 'walking')])

        assert precision(matrix, 'train') == 0
        assert recall(matrix, 'train') == 0
        assert precision(matrix, 'boat') == 0
        assert recall(matrix, 'boat') == 0
        assert f1_score(0.0, 0.0) == 0

    def test_classification_report(self):
        matrix = build_confusion_matrix([
            ('walking', 'walking'),
            ('walking', 'cycling'),
            ('cycling', 'cycling'),
        ])
        report = classification_report(matrix)

        assert list(report.index) == ['walking', 'cycling', 'bus', 'car', 'train']
        assert set(report.columns) == {'precision', 'recall', 'f1', 'support'}
        assert report.loc['walking', 'support'] == 2
        assert report.loc['cycling', 'precision'] == 0.5
        assert report.loc['train', 'f1'] == 0


class TestCompareClassifiers:
    """Tests for scoring all classifiers on a labelled dataset."""

    @pytest.fixture(scope='class')
    def dataset(self):
        trajectories = generate_trajectory_dataset(num_per_mode=2, seed=42)
        truth = [df['mode'].iloc[0] for df in trajectories]
        return trajectories, truth

    def test_results_per_classifier(self, dataset):
        trajectories, truth = dataset
        results = compare_classifiers(trajectories, truth)

        assert set(results) == {'baseline', 'percentile95', 'stop_pattern', 'heading_change', 'combined'}
        for result in results.values():
            assert len(result.predictions) == len(trajectories)
            assert result.confusion_matrix.values.sum() <= len(trajectories)
            assert 0 <= result.accuracy <= 1
            assert 0 <= result.coverage <= 1
            assert result.processing_time >= 0

    def test_scoped_vocabularies(self, dataset):
        trajectories, truth = dataset
        results = compare_classifiers(trajectories, truth)

        assert list(results['stop_pattern'].confusion_matrix.index) == ['bus', 'car']
        assert 'bus-or-car' in results['baseline'].confusion_matrix.index
        # Only bus and car trajectories are scored for stop patterns
        assert results['stop_pattern'].confusion_matrix.values.sum() <= 4

    def test_percentile95_accuracy(self, dataset):
        trajectories, truth = dataset
        results = compare_classifiers(trajectories, truth)
        assert results['percentile95'].accuracy >= 0.6

    def test_summary(self, dataset):
        trajectories, truth = dataset
        results = compare_classifiers(trajectories, truth)
        summary = comparison_summary(results)

        assert list(summary.index) == list(results)
        assert {'accuracy', 'macro_f1', 'coverage', 'processing_time'} <= set(summary.columns)

    def test_length_mismatch(self, dataset):
        trajectories, truth = dataset
        with pytest.raises(ValueError):
            compare_classifiers(trajectories, truth[:-1])

    def test_unscored_truth_labels(self):
        """Sensor labels outside the transport modes are not scored."""
        trajectories = generate_trajectory_dataset(num_per_mode=1, seed=7)
        truth = ['stationary'] * len(trajectories)
        results = compare_classifiers(trajectories, truth)

        for result in results.values():
            assert result.confusion_matrix.values.sum() == 0
            assert result.coverage == 0

    def test_automotive_truth_split_by_speed(self):
        """Automotive sensor labels become bus, car or train from fix speeds."""
        def steady(speed_kmh):
            n = 10
            return pd.DataFrame({
                'timestamp': np.arange(n) * 10,
                'latitude': 42.0 + np.arange(n) * 0.001,
                'longitude': np.full(n, -71.0),
                'speed_kmh': np.full(n, speed_kmh),
                'heading': np.zeros(n),
            })

        # 5.6, 20 and 35 m/s
        trajectories = [steady(20.0), steady(72.0), steady(126.0)]
        results = compare_classifiers(trajectories, ['automotive'] * 3)
        matrix = results['combined'].confusion_matrix

        assert matrix.values.sum() == 3
        assert matrix.loc['bus', 'cycling'] == 1
        assert matrix.loc['car', 'car'] == 1
        assert matrix.loc['train', 'train'] == 1
        assert results['combined'].coverage == 1

    def test_automotive_truth_without_speed_is_unscored(self):
        trajectories = [[{'latitude': 42.0, 'longitude': -71.0, 'timestamp': 0}]]
        results = compare_classifiers(trajectories, ['automotive'])
        assert results['combined'].confusion_matrix.values.sum() == 0


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
