import logging
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from rtrwh_calculator.config.settings import MONGO_URI, DB_NAME

logger = logging.getLogger(__name__)


class Database:
    client: MongoClient = None
    db = None

    def connect(self):
        """
        Establishes connection to MongoDB.
        Fails fast if the server is unreachable so startup halts immediately.
        """
        try:
            self.client = MongoClient(
                MONGO_URI,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000
            )
            self.client.admin.command('ping')
            self.db = self.client[DB_NAME]
            logger.info(f"✅ Connected to MongoDB: {DB_NAME}")

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.critical(f"❌ Failed to connect to MongoDB: {e}")
            raise e

    def get_submissions_collection(self) -> Collection:
        """Returns the collection holding calculation submissions."""
        if self.db is None:
            self.connect()
        return self.db["submissions"]

    def close(self):
        """Closes the connection."""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("MongoDB connection closed.")


# Singleton Instance
db = Database()
