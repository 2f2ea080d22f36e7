"""
Domain models — re-exported for convenient access:

    from asl3_mapp.core.models import StepOutcome, RunReport
"""

from asl3_mapp.core.models.outcome import RunReport, StepOutcome

__all__ = ["RunReport", "StepOutcome"]
