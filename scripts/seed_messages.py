#!/usr/bin/env python3
"""
Seed Messages Script

Fills the messages collection with short back-and-forth conversations between
random pairs of existing users, for trying the API and the live channel by hand.

Usage:
    python scripts/seed_messages.py [--clean] [--pairs N]

Note: Reads DATABASE_URL and DATABASE_NAME from the project .env file.
"""
from pymongo import MongoClient
from bson import ObjectId
from datetime import datetime, timezone, timedelta
import random
import argparse
import os
from dotenv import load_dotenv

# Build the path to the .env file located in the project root folder
env_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), '.env')
load_dotenv(dotenv_path=env_path)

MONGODB_URI = os.getenv("DATABASE_URL", "mongodb://localhost:27017")
MONGODB_DB = os.getenv("DATABASE_NAME", "marketzone")

SAMPLE_LINES = [
    "Hi, is this still available?",
    "Yes, it is.",
    "Would you take a lower price?",
    "I can do a small discount if you pick it up today.",
    "Where can we meet?",
    "Does it come with the original box?",
    "Can you send a few more photos?",
    "Deal, see you at six.",
]

def clean_existing_messages(messages_collection):
    """Remove all existing messages"""
    result = messages_collection.delete_many({})
    print(f"Deleted {result.deleted_count} messages")

def generate_test_messages(db, pairs: int, clean_first: bool = False):
    messages_collection = db['messages']
    users = [str(u['_id']) for u in db['users'].find({}, {"_id": 1})]

    if clean_first:
        clean_existing_messages(messages_collection)

    if len(users) < 2:
        print("Need at least two users in the database.")
        return

    print(f"Found {len(users)} users")
    max_pairs = len(users) * (len(users) - 1) // 2
    user_pairs = set()
    while len(user_pairs) < min(pairs, max_pairs):
        user_pairs.add(tuple(sorted(random.sample(users, 2))))

    now = datetime.now(timezone.utc)
    documents = []
    for participants in user_pairs:
        num_messages = random.randint(3, 8)
        started = now - timedelta(hours=random.randint(1, 72))
        for i in range(num_messages):
            # Alternate between users
            sender_id = participants[i % 2]
            receiver_id = participants[1 - i % 2]
            created_at = started + timedelta(minutes=5 * i)
            # Everything except the tail of each conversation has been read
            is_read = i < num_messages - 2
            documents.append({
                "_id": ObjectId(),
                "sender_id": sender_id,
                "receiver_id": receiver_id,
                "content": random.choice(SAMPLE_LINES),
                "product_id": None,
                "message_type": "text",
                "read": is_read,
                "read_at": created_at + timedelta(minutes=1) if is_read else None,
                "created_at": created_at,
            })

    if documents:
        messages_collection.insert_many(documents)
    print(f"Inserted {len(documents)} messages across {len(user_pairs)} conversations")

def main():
    parser = argparse.ArgumentParser(description="Generate test messages")
    parser.add_argument("--clean", action="store_true", help="Delete existing messages first")
    parser.add_argument("--pairs", type=int, default=10, help="Number of conversations to create")
    args = parser.parse_args()

    client = MongoClient(MONGODB_URI)
    try:
        generate_test_messages(client[MONGODB_DB], args.pairs, clean_first=args.clean)
    finally:
        client.close()

if __name__ == "__main__":
    main()
