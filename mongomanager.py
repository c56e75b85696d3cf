import os
import motor.motor_asyncio
import pymongo


DB_NAME = os.getenv("MONGO_DB_NAME", "Storefront")

client = motor.motor_asyncio.AsyncIOMotorClient(os.getenv("MONGO_DB_URL"))
db = client.get_database(DB_NAME)

product_collection = db.get_collection("Products")
orders_collection = db.get_collection("Orders")

# the cart store is synchronous, so its slots live behind a blocking client
sync_client = pymongo.MongoClient(os.getenv("MONGO_DB_URL"), connect=False)
cart_slot_collection = sync_client.get_database(DB_NAME).get_collection(
    os.getenv("CART_SLOT_COLLECTION", "Cart_Slots"))
