"""
IoT Dashboard Backend
=====================

REST API and client data layer for the IoT monitoring admin dashboard.

HOW IT'S ORGANIZED:
------------------
- models/    = Data structures (what does a user / sensor / measure look like?)
- services/  = CRUD over the MongoDB collections, plus the measures filter
- routers/   = API endpoints (the doors into our app)
- client/    = What the dashboard runs: HTTP client, joins, composed views
- main.py    = Puts it all together and starts the server
"""
