"""
Renovate custom datasource for World of Warcraft versions.

Fetches WoW version data from CurseForge and publishes it as static JSON
files (versions.json, game-versions.json) that Renovate can consume.
"""

__title__ = "wow-renovate-datasource"
__version__ = "1.0.0"
