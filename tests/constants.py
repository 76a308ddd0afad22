"""
Shared test constants.

Tenant ids and URLs used across the test suite. ``API_URL`` is what every
mocked route is registered under.
"""

API_URL = "https://api.example.com"
CDN_URL = "https://cdn.example.com"
CID = "1234"
PID = "DE_5678"
SECRET = "test-secret"

TOKEN_URL = f"{API_URL}/basic/auth/token"
ME_URL = f"{API_URL}/basic/accounts/me"
