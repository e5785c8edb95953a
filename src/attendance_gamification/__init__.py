"""Attendance Gamification package.

Organized by feature modules (points, streaks, badges, leaderboard, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""
