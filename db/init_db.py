from pymongo import ASCENDING, DESCENDING

async def init_db_indexes(db):
    """
    Initialize database with required indexes and configurations
    """
    # Pair history and per-pair unread counts
    await db.messages.create_index([
        ("sender_id", ASCENDING),
        ("receiver_id", ASCENDING),
        ("created_at", DESCENDING)
    ])

    # Unread badge for a single receiver
    await db.messages.create_index([("receiver_id", ASCENDING), ("read", ASCENDING)])

    # Newest-first scans for conversation aggregation
    await db.messages.create_index([("created_at", DESCENDING)])
