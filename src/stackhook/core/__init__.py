"""
Core hook components.

This package contains:
- Level and severity mapping
- The logging hook itself
- The google-cloud-logging client wrapper
- Sync delivery context and exceptions
"""
