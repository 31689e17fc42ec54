"""Simulated clock for driving the poller without real sleeps."""

from dataclasses import dataclass, field


@dataclass(kw_only=True)
class FakeClock:
    """Monotonic clock advanced only by ``sleep``."""

    now: float = 0.0
    sleeps: list[float] = field(default_factory=list)

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
