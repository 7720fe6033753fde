"""weightcal: personal weight and calorie log with cloud-folder sync."""

__version__ = "0.1.0"
