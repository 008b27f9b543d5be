#!/usr/bin/env python3
"""
Example usage of the transportation-mode classifiers.

This script demonstrates:
1. Generating synthetic trajectories per mode
2. Classifying them with all four heuristics
3. Comparing the heuristics on a labelled dataset
"""

import pandas as pd
from transport_mode import (
    classify_trajectory,
    compare_classifiers,
    extract_features,
    generate_trajectory,
    generate_trajectory_dataset,
)
from transport_mode.evaluation import comparison_summary
from transport_mode.sample_data import MODE_PROFILES


def example_individual_modes():
    """Example: classify one trajectory per mode."""
    print("=" * 60)
    print("Example 1: Individual Modes")
    print("=" * 60)

    rows = []
    for mode in MODE_PROFILES:
        df = generate_trajectory(mode, duration=600, seed=42)
        result = classify_trajectory(df)
        features = extract_features(df)
        rows.append({
            'mode': mode,
            'points': features.num_points,
            'max_kmh': features.max_speed_kmh,
            'p95_kmh': features.p95_speed_kmh,
            'stops': features.num_stops,
            'baseline': result.baseline.value,
            'percentile95': result.percentile95.value,
            'stop_pattern': result.stop_pattern.value if result.stop_pattern else None,
            'heading': result.heading_change.value if result.heading_change else None,
            'combined': result.mode.value if result.mode else None,
        })

    print()
    print(pd.DataFrame(rows).to_string(index=False, float_format='%.1f'))


def example_outlier_robustness():
    """Example: a single GPS spike fools the baseline but not percentile95."""
    print("\n" + "=" * 60)
    print("Example 2: Outlier Robustness")
    print("=" * 60)

    df = generate_trajectory('walking', duration=3000, seed=7)
    df.loc[150, 'speed_kmh'] = 50.0

    result = classify_trajectory(df)
    print(f"\nWalking trajectory with one 50 km/h spike ({len(df)} points):")
    print(f"  Baseline:     {result.baseline.value}")
    print(f"  Percentile95: {result.percentile95.value}")


def example_comparison():
    """Example: score every classifier on a labelled dataset."""
    print("\n" + "=" * 60)
    print("Example 3: Classifier Comparison")
    print("=" * 60)

    trajectories = generate_trajectory_dataset(num_per_mode=4, seed=42)
    truth = [df['mode'].iloc[0] for df in trajectories]
    results = compare_classifiers(trajectories, truth)

    print(f"\nDataset: {len(trajectories)} trajectories")
    print(comparison_summary(results).to_string(float_format='%.3f'))

    for name, result in results.items():
        print(f"\n{name}: {result.description}")
        print(result.confusion_matrix.to_string())


if __name__ == '__main__':
    example_individual_modes()
    example_outlier_robustness()
    example_comparison()

    print("\n" + "=" * 60)
    print("All examples completed!")
    print("=" * 60)
