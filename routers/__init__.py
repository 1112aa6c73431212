# routers/__init__.py
from . import auth, duty_checks, faults, reports, sites, stats, users

__all__ = ["auth", "duty_checks", "faults", "reports", "sites", "stats", "users"]
