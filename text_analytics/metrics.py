import threading
from collections import defaultdict, deque
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

P_CALLS = Counter('text_analytics_calls_total', 'Text analytics calls', ['operation', 'outcome'])
H_LAT = Histogram('text_analytics_call_ms', 'Text analytics call latency ms', buckets=(50, 100, 250, 500, 1000, 2000, 5000))

_lock = threading.Lock()
counters = defaultdict(int)
timings_ms = defaultdict(lambda: deque(maxlen=5000))

def inc(name: str, amount: int = 1) -> None:
    with _lock:
        counters[name] += amount

def observe_ms(name: str, duration_ms: float) -> None:
    with _lock:
        timings_ms[name].append(duration_ms)

def record_call(operation: str, outcome: str, duration_ms: float) -> None:
    inc(f'analytics_{operation}_{outcome}_total')
    observe_ms('analytics_call_ms', duration_ms)
    P_CALLS.labels(operation=operation, outcome=outcome).inc()
    H_LAT.observe(duration_ms)

def prometheus_payload() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST

def snapshot_metrics():
    with _lock:
        c = dict(counters)
        t = {k: list(v) for k, v in timings_ms.items()}
    def stats(vals):
        if not vals:
            return {'count': 0, 'p50': 0, 'p95': 0, 'max': 0}
        sorted_vals = sorted(vals)
        count = len(sorted_vals)
        p50 = sorted_vals[int(0.5 * (count - 1))]
        p95 = sorted_vals[int(0.95 * (count - 1))]
        return {'count': count, 'p50': p50, 'p95': p95, 'max': sorted_vals[-1]}
    return {
        'counters': c,
        'timings_ms': {k: stats(v) for k, v in t.items()}
        }
