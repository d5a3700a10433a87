from taskmanager.database import create_tables, get_session
from taskmanager.errors import ConflictError
from taskmanager.services import accounts

# Create tables if not exist
create_tables()

email = "test@example.com"
password = "Password1"

with get_session() as db:
    try:
        accounts.register(db, "Test User", email, password)
    except ConflictError:
        print("User already exists")
    else:
        print(f"Test user created: {email} / {password}")
