# dependencies/db.py

async def get_db():
    """
    Dependency for database access.
    Returns MongoDB database connection from the connection pool.
    """
    from db.db import get_db as db_connection
    db = await db_connection()
    return db
