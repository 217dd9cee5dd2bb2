"""
auth — User authentication module.

Provides:
  • Signed token creation & verification (HMAC-SHA256, 1 h expiry)
  • Password hashing (bcrypt)
  • Signup / login / dashboard API routes
  • ``get_current_user`` FastAPI dependency (the access guard)
"""
