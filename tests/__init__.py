"""
from_fix Test Suite

Structure:
- unit/: Unit tests for individual components
- integration/: End-to-end replay through the CLI service
"""
