from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)

class Database:
    client: AsyncIOMotorClient = None
    db = None

db = Database()

async def connect_to_mongo():
    """Connect to MongoDB."""
    try:
        logger.info("Connecting to MongoDB...")
        db.client = AsyncIOMotorClient(settings.MONGO_URI)
        db.db = db.client[settings.DB_NAME]
        logger.info("Connected to MongoDB.")

        # Create indexes for collections
        await create_indexes()

    except Exception as e:
        logger.error(f"Could not connect to MongoDB: {e}")
        raise e

async def close_mongo_connection():
    """Close MongoDB connection."""
    if db.client:
        logger.info("Closing MongoDB connection...")
        db.client.close()
        logger.info("MongoDB connection closed.")

async def create_indexes():
    """Create indexes for collections.

    The unique index on slot_claims is what keeps two non-cancelled
    appointments of one salon from sharing a minute, so a failure here
    is fatal rather than logged and ignored.
    """
    # Salons collection indexes
    await db.db.salons.create_index("slug", unique=True)
    await db.db.salons.create_index("ownerId", unique=True)

    # Services collection indexes
    await db.db.services.create_index([("salonId", ASCENDING), ("displayOrder", ASCENDING)])

    # Appointments collection indexes
    await db.db.appointments.create_index([("salonId", ASCENDING), ("date", ASCENDING)])
    await db.db.appointments.create_index([("salonId", ASCENDING), ("status", ASCENDING)])

    # Availability blocks collection indexes
    await db.db.availability_blocks.create_index([("salonId", ASCENDING), ("date", ASCENDING)])

    # Slot claims: one document per occupied minute
    await db.db.slot_claims.create_index(
        [("salonId", ASCENDING), ("date", ASCENDING), ("minute", ASCENDING)],
        unique=True
    )
    await db.db.slot_claims.create_index("appointmentId")

    logger.info("MongoDB indexes created successfully.")
