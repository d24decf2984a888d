"""
Demo: Build a small graph by hand and watch a change cascade.

Run: python scripts/demo_cascade.py
"""

from datetime import datetime, timedelta

import numpy as np

from tsgraph import (
    ARModel,
    DirectedGraph,
    ExpSmoother,
    LinearCombinationTransform,
    SeriesSource,
    TimeSeries,
)
from tsgraph.numerics import adfuller

print("="*70)
print("Cascade Demo")
print("="*70)

rng = np.random.default_rng(0)
start = datetime(2024, 1, 1)
stamps = [start + timedelta(days=i) for i in range(250)]

# Two cointegrated random walks
print("\n1. Simulating prices...")
common = np.cumsum(rng.normal(size=250))
x = TimeSeries.from_arrays(stamps, 100.0 + common + rng.normal(scale=0.5, size=250), title='X')
y = TimeSeries.from_arrays(stamps, 50.0 + 0.5 * common + rng.normal(scale=0.5, size=250), title='Y')
print(f"✅ {x!r}")
print(f"✅ {y!r}")

# X -> smoother -> spread <- Y, spread -> AR(1)
print("\n2. Wiring graph...")
graph = DirectedGraph()
source_x = SeriesSource(x)
source_y = SeriesSource(y)
smoother = ExpSmoother(smooth_factor=0.7)
spread = LinearCombinationTransform(coefficients=[0.5, -1.0], requires_exact_time_match=True)
model = ARModel(order=1)

for item in (source_x, source_y, smoother, spread, model):
    graph.add_node(item)
graph.add_directional_link(source_x, 0, smoother, 0)
graph.add_directional_link(smoother, 0, spread, 0)
graph.add_directional_link(source_y, 0, spread, 1)
graph.add_directional_link(spread, 0, model, 0)
print(f"✅ {graph!r}")
print(f"   Topological order: {graph.topological_order()}")

print("\n3. Cascading from both sources...")
for source in (source_y, source_x):
    pushed = graph.cascade_from(source)
    print(f"   {type(source).__name__} {source.series.title}: {len(pushed)} link(s) pushed")

result = adfuller(spread.get_output(0))
print(f"✅ Spread: {spread.get_output(0).title}")
print(f"   ADF statistic {result.statistic:.3f} vs {result.critical_value:.2f} "
      f"-> {'stationary' if result.is_stationary else 'unit root'}")
print(f"   AR(1): mu={model.mu:.3f} phi={model.phi[0]:.3f} sigma2={model.sigma2:.3f}")

print("\n4. Updating X and re-cascading...")
source_x.set_series(TimeSeries.from_arrays(stamps, x.values * 1.01, title='X'))
graph.cascade_from(source_x)
print(f"   AR(1): mu={model.mu:.3f} phi={model.phi[0]:.3f}")

print("\n5. Removing the smoother...")
graph.remove_node(smoother)
print(f"✅ {graph!r}")
for i, record in enumerate(graph):
    print(f"   [{i}] {type(record.item).__name__:<28} in={graph.predecessors(i)} out={graph.successors(i)}")

print("\n" + "="*70)
