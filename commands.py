# Quick reference commands (run from repo root). These are comments only; copy/paste as needed.

# Install the package with test dependencies
# python -m pip install -e ".[test]"

# Run the full test suite
# python -m pytest

# Run focused test files
# python -m pytest tests/test_validation.py
# python -m pytest tests/test_security_headers.py
# python -m pytest tests/test_rate_limits.py
# python -m pytest tests/test_password_reset.py tests/test_password_reset_flow.py
# python -m pytest tests/test_auth_flow.py

# Start the API locally (reads .env; fails fast if required variables are missing)
# python main.py

# Or with autoreload
# python -m dotenv run -- python -m uvicorn app.api:app --reload --port 3000

# Local SQLite database instead of Postgres
# DATABASE_URL=sqlite:///./dev.db python main.py

# Inspect the database (example query)
# python scripts/db_shell.py "SELECT id, username, email, created_at FROM users"
# python scripts/db_shell.py "SELECT * FROM applications ORDER BY applied_date DESC LIMIT 5"
