#!/usr/bin/env python3
"""
Access Token Script

Prints a signed access token for a user id, for calling the messaging API
or opening a live connection by hand.

Usage:
    python scripts/create_token.py <user_id> [expires_minutes]

Example:
    python scripts/create_token.py 665f1c2b9a1e4b7d8c0f1234 120

Note: Make sure to run this script from the project root directory with the
same JWT_SECRET_KEY the server uses.
"""

import argparse
import sys
import os
from datetime import timedelta

# Add the project root directory to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

# Import after setting up path
from db.mongodb import is_valid_object_id
from helpers.auth import create_access_token

def main():
    parser = argparse.ArgumentParser(description="Print a signed access token for a user id")
    parser.add_argument("user_id", help="Id of an existing user")
    parser.add_argument("expires_minutes", nargs="?", type=int, help="Token lifetime in minutes")
    args = parser.parse_args()

    if not is_valid_object_id(args.user_id):
        print(f"Error: '{args.user_id}' is not a valid user id")
        sys.exit(1)

    expires = timedelta(minutes=args.expires_minutes) if args.expires_minutes else None
    try:
        token = create_access_token(args.user_id, expires)
        print(f"Access token: {token}")
    except Exception as e:
        print(f"Error: {str(e)}")
        sys.exit(1)

if __name__ == "__main__":
    main()
