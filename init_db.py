#!/usr/bin/env python3
"""
Database initialization script for the Student Records admin dashboard
Run this script to create the tables and the default admin account
"""

from app import create_app
from database import init_db, reset_database
import sys

def main():
    """Main function to initialize database"""
    app = create_app()

    if len(sys.argv) > 1 and sys.argv[1] == '--reset':
        print("WARNING: This will delete all existing students!")
        confirm = input("Are you sure you want to reset the database? (yes/no): ")
        if confirm.lower() == 'yes':
            reset_database(app)
            print("Database reset completed.")
        else:
            print("Database reset cancelled.")
    else:
        init_db(app)
        print("Database initialized. Default login: "
              f"{app.config['DEFAULT_ADMIN_USERNAME']}/{app.config['DEFAULT_ADMIN_PASSWORD']}")

if __name__ == '__main__':
    main()
