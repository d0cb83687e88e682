"""Unit tests for NusaDana web route modules.

Structure:
    tests/unit/web/
    ├── test_routes_auth.py          # Registration, login, token checks
    ├── test_routes_projects.py      # Project CRUD and prioritisation
    ├── test_routes_funds.py         # Funds, expenses, progress, schedule
    ├── test_routes_documents.py     # Document upload
    └── test_routes_reports.py       # LPJ, month metrics, health

Testing pattern:
    - Use FastAPI's TestClient against the full app (SQLite + local storage)
    - Test auth requirements
    - Test request/response validation
    - Test error bodies
"""
