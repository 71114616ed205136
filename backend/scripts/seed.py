#!/usr/bin/env python3
"""
Seed script: replaces the users and questions collections with demo data
for the admin dashboard. Run from backend/: python scripts/seed.py
"""

import os
import sys
from datetime import datetime, timezone, timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from pymongo import MongoClient

from app.models.user import User
from app.models.question import Question

STUDENT_HOURS_SINCE_ACTIVE = [2, 5, 12, 18, 20, 3, 1, 23, 48, 96]

QUESTIONS = [
    ("How do I solve quadratic equations?", "Math", "Algebra", 150, 45, 85,
     "To solve quadratic equations, use the quadratic formula: x = (-b ± √(b²-4ac)) / 2a"),
    ("What is the powerhouse of the cell?", "Science", "Biology", 200, 60, 92,
     "The powerhouse of the cell is the mitochondrion, which produces ATP energy."),
    ("Explain the main causes of WWI", "History", "World War I", 180, 55, 88,
     "The main causes of WWI were militarism, alliances, imperialism, and nationalism (MAIN)."),
    ("What is a verb?", "English", "Grammar", 120, 35, 95,
     "A verb is a word that describes an action, occurrence, or state of being."),
    ("What are Calculus Derivatives?", "Math", "Calculus Derivatives", 250, 75, 78,
     "A derivative represents the rate of change of a function with respect to its variable."),
    ("What is photosynthesis?", "Science", "Biology", 90, 20, 90,
     "Photosynthesis is how plants turn light, water and carbon dioxide into glucose and oxygen."),
    ("How do I find the area of a circle?", "Math", "Geometry", 60, 12, 97,
     "The area of a circle is πr², where r is the radius."),
    ("Who wrote Romeo and Juliet?", "English", "Literature", 40, 8, None,
     "Romeo and Juliet was written by William Shakespeare."),
]


def seed():
    mongo_url = os.environ.get('MONGO_URL')
    db_name = os.environ.get('DB_NAME', 'homeworkhelper')

    if not mongo_url:
        print("ERROR: MONGO_URL environment variable required")
        print("The API serves mock analytics without a database, so seeding is optional.")
        sys.exit(1)

    client = MongoClient(mongo_url, serverSelectionTimeoutMS=30000)
    db = client[db_name]
    print(f"Connected to database: {db_name}")

    db.users.delete_many({})
    db.questions.delete_many({})
    print("Cleared old data")

    now = datetime.now(timezone.utc)
    students = [
        User(
            email=f"student{i + 1}@example.com",
            role="student",
            lastActive=(now - timedelta(hours=hours)).isoformat(),
        ).model_dump()
        for i, hours in enumerate(STUDENT_HOURS_SINCE_ACTIVE)
    ]
    students.append(User(email="admin@example.com", role="admin", lastActive=now.isoformat()).model_dump())
    db.users.insert_many(students)
    print(f"Created {len(students)} users")

    questions = []
    for i, (text, subject, topic, ask_count, upvotes, accuracy, answer) in enumerate(QUESTIONS):
        asked_at = (now - timedelta(days=i * 4)).isoformat()
        questions.append(Question(
            text=text,
            subject=subject,
            topic=topic,
            answer=answer,
            askCount=ask_count,
            upvotes=upvotes,
            accuracyRating=accuracy,
            askedBy=f"seed-student-{i % 5 + 1}",
            askedAt=asked_at,
            createdAt=asked_at,
        ).model_dump(exclude_none=True))
    db.questions.insert_many(questions)
    print(f"Created {len(questions)} questions")

    client.close()
    print("✅ Seeding complete")


if __name__ == "__main__":
    seed()
