"""Activity tracker package.

Attendance session engine: work sessions, breaks, overtime/undertime and the
daily activity summary, organized by feature modules with a thin Flask
controller over service/repository layers.
"""
