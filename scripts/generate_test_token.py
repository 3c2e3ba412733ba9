#!/usr/bin/env python3
"""Generate test JWT tokens for API testing."""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.auth import create_access_token

manager_token = create_access_token(
    "manager-test", roles=["manager"], email="manager@example.com", name="Test Manager"
)
print(f"Manager Token:\n{manager_token}\n")

employee_token = create_access_token(
    "employee-test", roles=["employee"], email="employee@example.com", name="Test Employee"
)
print(f"Employee Token:\n{employee_token}")
