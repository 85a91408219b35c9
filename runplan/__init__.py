"""RunPlan - execution planning for the workflow editor's run trigger."""

__version__ = "0.1.0"
