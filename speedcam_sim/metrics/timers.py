import time


class Timer:
    """
    Context for wall time measurement.
    """

    def __enter__(self):
        self.start = time.perf_counter()
        self.elapsed = 0.0
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - self.start

    def rate(self, count: int) -> float:
        """count / elapsed, 0 when nothing was measured"""
        return count / self.elapsed if self.elapsed > 0.0 else 0.0
