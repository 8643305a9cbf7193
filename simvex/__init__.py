"""
SimVex API

Backend for collaborative 3D simulation projects: teams, projects, member
rosters and the 3D assets attached to them.
"""

__version__ = "1.0.0"
