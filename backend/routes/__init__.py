"""
FastAPI routers for all API endpoints.

Each module defines a router for one area (invoices, analytics, export,
chat, auth, health). Routes parse and validate input, call a service or
agent, and map the result to a response model.
"""
