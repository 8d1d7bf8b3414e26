"""
API Module for Lead Concierge.

- flows: discovery step definitions and the conversation engine
- routes: conversation and lead endpoints
- main: FastAPI application (create_app, app)
"""
