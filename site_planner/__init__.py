# site_planner/__init__.py
"""site-planner: phase scheduling and numbering for construction projects."""

__version__ = "0.1.0"
