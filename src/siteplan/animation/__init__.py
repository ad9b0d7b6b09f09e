"""Status animation: the staggered reveal/conceal sweep and its timers."""

from siteplan.animation.scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from siteplan.animation.sequencer import StatusSequencer

__all__ = ["AsyncioScheduler", "ManualScheduler", "Scheduler", "StatusSequencer"]
