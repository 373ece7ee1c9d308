from core.cache import ResponseCache
from core.monitor import StatusMonitor
from core.scheduler import Scheduler

__all__ = ["ResponseCache", "StatusMonitor", "Scheduler"]
