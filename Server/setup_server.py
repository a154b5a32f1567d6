#!/usr/bin/env python3
"""
OilDesk Server - Setup and Deployment Script

This script initializes the OilDesk server for deployment:
1. Creates SQLite database with schema
2. Creates the bootstrap admin account
3. Populates default settings
4. Provisions users for approved requests that are missing one

Run this script on the server to set up OilDesk for the first time.

Usage:
    python setup_server.py
"""

import sys
from pathlib import Path

# Ensure we can import from the same directory
sys.path.insert(0, str(Path(__file__).parent))

from managers.database_manager import DatabaseManager, DEFAULT_DB_PATH
from managers.document_store import DocumentStore
from request_lifecycle import ReconcileApprovals


def print_header():
    """Print script header"""
    print("=" * 70)
    print("OilDesk Server - Setup and Deployment Script")
    print("=" * 70)
    print()


def print_section(title):
    """Print section header"""
    print()
    print("-" * 70)
    print(f"  {title}")
    print("-" * 70)


def initialize_database():
    """
    Initialize the SQLite database with schema and default data

    Returns:
        tuple: (DatabaseManager, admin credentials or None)
    """
    print_section("Database Initialization")

    db_path = Path(DEFAULT_DB_PATH)

    # Check if database already exists
    if db_path.exists():
        print(f"[OK] Database file found at: {db_path.absolute()}")
        print("  Existing database will be updated with any missing tables/settings.")
    else:
        print(f"-> Creating new database at: {db_path.absolute()}")

    print()

    try:
        db_manager = DatabaseManager()
        admin_credentials = db_manager.InitializeDatabase()

        print()
        print("[OK] Database initialization complete!")

        return db_manager, admin_credentials

    except Exception as e:
        print(f"[ERROR] Database initialization failed: {str(e)}")
        raise


def reconcile_approvals(db_manager):
    """Provision users for approved requests left without one"""
    print_section("Approved Request Reconciliation")

    healed = ReconcileApprovals(DocumentStore(db_manager))
    if healed:
        print(f"[OK] Provisioned {healed} missing user(s) from approved requests")
    else:
        print("[OK] Every approved request has its user")


def print_admin_credentials(email, password):
    """
    Print admin credentials prominently

    Args:
        email: Bootstrap admin email
        password: Generated admin password
    """
    print()
    print("!" * 70)
    print("!" + " " * 68 + "!")
    print("!  IMPORTANT: SAVE THESE CREDENTIALS - PASSWORD SHOWN ONLY ONCE!  !")
    print("!" + " " * 68 + "!")
    print("!" * 70)
    print()
    print(f"  Admin Email:    {email}")
    print(f"  Admin Password: {password}")
    print()
    print("!" * 70)
    print()


def print_next_steps():
    """Print next steps for server deployment"""
    print_section("Next Steps")

    print("""
1. Start the Server:

   python server.py

   Or with uvicorn directly:

   uvicorn server:app --host 0.0.0.0 --port 8000

2. Access the Admin Interface:

   Open your browser to: http://localhost:8000/admin

   Log in with the admin credentials shown above.

3. Review Access Requests:

   Approve or reject pending requests from GET /admin/api/requests.
""")


def main():
    """Main setup script entry point"""
    print_header()

    print("This script will set up the OilDesk server for deployment.")
    print("It will initialize the database and configure default settings.")
    print()

    # Confirm before proceeding
    try:
        response = input("Continue with setup? (Y/n): ")
        if response.lower() == 'n':
            print("\nSetup cancelled.")
            sys.exit(0)
    except KeyboardInterrupt:
        print("\n\nSetup cancelled.")
        sys.exit(0)

    try:
        db_manager, admin_credentials = initialize_database()
        reconcile_approvals(db_manager)
    except Exception:
        print("\n[ERROR] Setup failed during database initialization")
        sys.exit(1)

    print()
    print("=" * 70)
    print("[OK] OilDesk Server Setup Complete!")
    print("=" * 70)

    # Display admin credentials if this was first-time setup
    if admin_credentials:
        print_admin_credentials(*admin_credentials)
    else:
        print()
        print("  Database already contained an admin account - no new account created.")
        print()

    print_next_steps()


if __name__ == "__main__":
    main()
