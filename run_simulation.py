#!/usr/bin/env python3
"""
Run task: one simulation of the L-DOPA model.

Simulates to t = 12 s and plots every species with default labels.
"""

import logging
import os
import sys
import matplotlib
matplotlib.use('Agg')

# Ensure project root is in path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from models.pharmacokinetic import LDopaModel
from sim.config import ConfigSet
from sim.scan import run_simulation
from sim.plotting import PlotRequest, plot_time, save_figure


STOP_TIME = 12.0
TIME_UNITS = 'second'


def main():
    """Run the simulation task."""
    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    model = LDopaModel()
    config = ConfigSet()
    print(f"Model: {model}")

    trajectory = run_simulation(model, config,
                                overrides={'stop_time': STOP_TIME,
                                           'time_units': TIME_UNITS})

    for name, m in trajectory.compute_metrics().items():
        print(f"  {name}: final = {m['final']:.4f}, max = {m['max']:.4f}")

    result = plot_time(trajectory, PlotRequest())
    save_figure(result.figure, 'simulation', output_dir='report/figures')
    print("  Saved: report/figures/simulation.png")

    return True


if __name__ == '__main__':
    success = main()
    sys.exit(0 if success else 1)
