"""
routers/ — FastAPI route modules.

Each file contains a thin APIRouter. Business logic lives in
services/. Routers validate input, call services, and return
responses.
"""
