"""
Pydantic schemas for API request and response validation.

All FastAPI endpoints use explicit Pydantic models. Field aliases keep the
camelCase names the web client already sends and reads.
"""
