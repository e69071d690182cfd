import threading

from carousel.reviews.cache import MemoryCache

THREADS = 8
ROUNDS = 300


def _accounted(cache: MemoryCache) -> int:
    return sum(e.size_bytes for e in cache._entries.values())


def _run_threads(targets):
    barrier = threading.Barrier(len(targets))
    errors = []

    def wrap(fn):
        def run():
            barrier.wait()
            try:
                fn()
            except Exception as exc:
                errors.append(exc)

        return run

    threads = [threading.Thread(target=wrap(fn)) for fn in targets]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert not any(t.is_alive() for t in threads)
    assert errors == []


def test_parallel_mixed_operations_keep_accounting_consistent():
    cache = MemoryCache(max_items=50, max_memory_mb=0.01, sweep_interval_seconds=None)

    def worker(n):
        def run():
            for i in range(ROUNDS):
                key = f"k{(n * 7 + i) % 80}"
                op = i % 4
                if op == 0:
                    cache.set(key, {"n": n, "body": "x" * (i % 120)}, 0.01)
                elif op == 1:
                    cache.get(key)
                elif op == 2:
                    cache.delete(key)
                else:
                    cache.set(key, [n, i])

        return run

    _run_threads([worker(n) for n in range(THREADS)])

    assert len(cache) <= cache.max_items
    assert cache.memory_usage_bytes == _accounted(cache)
    assert cache.memory_usage_bytes < cache.soft_limit_bytes


def test_sweep_runs_alongside_writers():
    cache = MemoryCache(max_items=40, max_memory_mb=0.01, sweep_interval_seconds=None)
    stop = threading.Event()
    sweeps = []

    def writer(n):
        def run():
            for i in range(ROUNDS):
                cache.set(f"w{n}-{i % 30}", "v" * (i % 60), 0.005)
                cache.get(f"w{(n + 1) % THREADS}-{i % 30}")

        return run

    def sweeper():
        sweeps.append(cache.sweep())
        while not stop.is_set():
            sweeps.append(cache.sweep())

    writers = [writer(n) for n in range(THREADS - 1)]

    def last_writer():
        try:
            writers[-1]()
        finally:
            stop.set()

    _run_threads(writers[:-1] + [last_writer, sweeper])

    assert sweeps
    assert len(cache) <= cache.max_items
    assert cache.memory_usage_bytes == _accounted(cache)
    stats = cache.stats()
    assert stats.items == len(cache)
