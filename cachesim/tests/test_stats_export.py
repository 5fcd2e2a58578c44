import csv
import json

from cachesim.data.stats_export import (
    Exporter,
    Statistics,
    export_chart_pdf,
    export_stats_json,
    summary_line,
)


def _stats(hits, misses, evictions):
    s = Statistics()
    for _ in range(hits):
        s.record_hit()
    for i in range(misses):
        s.record_miss(evicted=i < evictions)
    return s


def test_statistics_rates():
    s = _stats(3, 1, 0)
    assert s.accesses == 4
    assert s.hit_rate == 0.75
    assert s.miss_rate == 0.25


def test_empty_statistics():
    s = Statistics()
    assert (s.hits, s.misses, s.evictions) == (0, 0, 0)
    assert s.hit_rate == 0.0
    assert s.miss_rate == 0.0


def test_reset():
    s = _stats(2, 2, 1)
    s.reset()
    assert s.as_dict()['accesses'] == 0
    assert s.evictions == 0


def test_summary_line():
    assert summary_line(_stats(4, 5, 3)) == "hits:4 misses:5 evictions:3"


def test_results_file(tmp_path):
    path = tmp_path / ".cachesim_results"
    Exporter.write_results(str(path), _stats(4, 5, 3))
    assert path.read_text() == "4 5 3\n"
    assert Exporter.read_results(str(path)) == (4, 5, 3)


def test_csv_export(tmp_path):
    path = tmp_path / "stats.csv"
    Exporter.export_stats_csv(str(path), _stats(1, 3, 2))
    with open(path, newline='') as f:
        rows = list(csv.reader(f))
    assert rows[0][:3] == ['hits', 'misses', 'evictions']
    assert rows[1][:4] == ['1', '3', '2', '4']


def test_json_export(tmp_path):
    path = tmp_path / "stats.json"
    export_stats_json(_stats(2, 2, 0), str(path))
    data = json.loads(path.read_text())
    assert data['stats']['hits'] == 2
    assert data['stats']['hit_rate'] == 0.5


def test_chart_export(tmp_path):
    path = tmp_path / "chart.png"
    assert export_chart_pdf(_stats(4, 5, 3), str(path)) == str(path)
    assert path.stat().st_size > 0
