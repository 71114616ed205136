"""
Turn stored question documents into the JSON payloads the mobile and admin
apps read (question history items, dashboard top questions).
"""

from datetime import datetime, timezone

from bson import ObjectId


def _timestamp(value: datetime) -> str:
    # PyMongo hands BSON dates back naive, already in UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def serialize_doc(doc):
    """
    Make a question document JSON-safe for the clients.

    `_id` becomes the string `id` the apps pass back (e.g. to the upvote
    route), other ObjectIds become strings, and BSON dates become the same
    ISO-8601 strings this API writes, so history entries look alike no matter
    which writer stored them.
    """
    if doc is None:
        return None
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, datetime):
        return _timestamp(doc)
    if isinstance(doc, list):
        return [serialize_doc(d) for d in doc]
    if isinstance(doc, dict):
        result = {}
        for key, value in doc.items():
            if key == "_id":
                result["id"] = str(value)
            else:
                result[key] = serialize_doc(value)
        return result
    return doc
