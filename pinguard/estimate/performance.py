"""Performance prediction — fixed per-instance CPU, power and response costs.

Costs are charged per construction.  Bottleneck and optimization
thresholds are compared against usage: constructions plus method calls
on variables holding an instance.
"""

from __future__ import annotations

from pinguard.config import AnalyzerConfig, DEFAULT_CONFIG
from pinguard.extract import Extraction
from pinguard.peripherals import PeripheralKind

from .models import Finding, PerformancePrediction, Rating, Severity


def rate(cpu_pct: float, config: AnalyzerConfig | None = None) -> Rating:
    config = config or DEFAULT_CONFIG
    if cpu_pct < config.rating_excellent_below:
        return Rating.EXCELLENT
    if cpu_pct < config.rating_good_below:
        return Rating.GOOD
    return Rating.POOR


def predict_performance(
    extraction: Extraction, config: AnalyzerConfig | None = None,
) -> PerformancePrediction:
    config = config or DEFAULT_CONFIG
    instances = extraction.instance_counts()
    usage = extraction.usage_counts()
    prediction = PerformancePrediction(source_id=extraction.source_id)

    for kind in PeripheralKind:
        cost = config.cost_for(kind)
        count = instances[kind]
        used = usage[kind]
        if count:
            prediction.instance_counts[kind.value] = count
        if used:
            prediction.usage_counts[kind.value] = used

        prediction.cpu_pct += count * cost.cpu_pct
        prediction.power_ma += count * cost.power_ma
        prediction.response_ms += count * cost.response_ms

        if cost.bottleneck_above is not None and used > cost.bottleneck_above:
            prediction.bottlenecks.append(cost.bottleneck_message.format(count=used))
        if cost.optimization_above is not None and used > cost.optimization_above:
            prediction.optimizations.append(cost.optimization_message.format(count=used))

    prediction.cpu_pct = round(prediction.cpu_pct, 2)
    prediction.power_ma = round(prediction.power_ma, 2)
    prediction.response_ms = round(prediction.response_ms, 2)
    prediction.rating = rate(prediction.cpu_pct, config)

    if prediction.rating is Rating.POOR:
        prediction.findings.append(Finding(
            Severity.WARNING,
            f"Estimated CPU usage {prediction.cpu_pct:g}% - performance rating POOR, "
            f"optimization needed",
            extraction.source_id, category="performance",
        ))
    return prediction
