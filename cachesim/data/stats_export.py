"""Statistics and exporter.
"""
import csv
import json
import os
from typing import Dict, Optional

RESULTS_FILE = ".cachesim_results"


class Statistics:
    def __init__(self):
        self.reset()

    def reset(self):
        # counters start from zero
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def record_hit(self):
        self.hits += 1

    def record_miss(self, evicted: bool = False):
        # a miss may also push a block out of a full set
        self.misses += 1
        if evicted:
            self.evictions += 1

    @property
    def accesses(self):
        # lookups, so a modify counts twice
        return self.hits + self.misses

    @property
    def hit_rate(self):
        return (self.hits / self.accesses) if self.accesses else 0.0

    @property
    def miss_rate(self):
        return (self.misses / self.accesses) if self.accesses else 0.0

    def as_dict(self) -> Dict[str, float]:
        return {
            'hits': self.hits,
            'misses': self.misses,
            'evictions': self.evictions,
            'accesses': self.accesses,
            'hit_rate': self.hit_rate,
            'miss_rate': self.miss_rate,
        }


def summary_line(stats: Statistics) -> str:
    return "hits:%d misses:%d evictions:%d" % (stats.hits, stats.misses, stats.evictions)


def export_stats_json(stats: Statistics, fpath: str) -> str:
    """Export the counters and rates to a JSON file. Returns the saved path.
    """
    with open(fpath, 'w', encoding='utf-8') as fh:
        json.dump({'stats': stats.as_dict()}, fh, indent=2)
    return fpath


def export_chart_pdf(stats: Statistics, fpath: str, title: Optional[str] = None) -> str:
    """Render hits / misses / evictions as a bar chart and save it.
    The format follows the file extension (pdf, png, svg, ...).
    Returns the saved file path.
    """
    # Use matplotlib
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    labels = ['hits', 'misses', 'evictions']
    values = [stats.hits, stats.misses, stats.evictions]
    fig, ax = plt.subplots(figsize=(5, 3))
    bars = ax.bar(labels, values, color=['#2E8B57', '#FFA500', '#B22222'])
    for bar, v in zip(bars, values):
        ax.annotate(str(v), (bar.get_x() + bar.get_width() / 2, bar.get_height()),
                    ha='center', va='bottom', fontsize=8)
    ax.set_ylabel('Count')
    ax.set_title(title or f'Hit rate {stats.hit_rate:.1%}')
    fig.tight_layout()
    ext = os.path.splitext(fpath)[1].lstrip('.') or 'pdf'
    fig.savefig(fpath, format=ext, dpi=150)
    plt.close(fig)
    return fpath


class Exporter:
    @staticmethod
    def write_results(path: str, stats: Statistics):
        # machine-readable "hits misses evictions" line
        with open(path, 'w') as f:
            f.write("%d %d %d\n" % (stats.hits, stats.misses, stats.evictions))

    @staticmethod
    def read_results(path: str):
        with open(path) as f:
            hits, misses, evictions = (int(v) for v in f.read().split())
        return hits, misses, evictions

    @staticmethod
    def export_stats_csv(path: str, stats: Statistics):
        with open(path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(['hits', 'misses', 'evictions', 'accesses', 'hit_rate', 'miss_rate'])
            writer.writerow([
                stats.hits, stats.misses, stats.evictions, stats.accesses,
                stats.hit_rate, stats.miss_rate,
            ])
