# ABOUTME: Web module for the subscriber and configuration HTTP API.
# ABOUTME: FastAPI application factory lives in web.app.
