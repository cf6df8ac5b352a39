"""
dislogger Testing Package.

Test Organization:
    unit/: Unit tests for individual components
    mocks.py: Mock aiohttp sessions and responses
"""
