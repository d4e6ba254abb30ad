"""Initial course and achievement catalogues loaded into an empty database."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from plumbprep.repositories import AchievementRepository, CourseRepository

logger = logging.getLogger(__name__)

COURSE_CATALOG: list[dict[str, Any]] = [
    {
        "slug": "journeyman-prep",
        "title": "Louisiana Journeyman Prep",
        "description": (
            "Comprehensive Louisiana plumbing code certification preparation course covering "
            "all aspects of state plumbing regulations and best practices."
        ),
        "course_type": "journeyman",
        "price": 39.99,
        "duration_hours": 5,
        "lesson_count": 3,
        "practice_test_count": 3,
        "is_active": True,
    },
    {
        "slug": "backflow-prevention",
        "title": "Louisiana Backflow Prevention Training",
        "description": (
            "Backflow prevention testing, repairs and field report completion, including "
            "testing procedures, equipment maintenance and regulatory compliance."
        ),
        "course_type": "backflow",
        "price": 29.99,
        "duration_hours": 8,
        "lesson_count": 12,
        "practice_test_count": 5,
        "is_active": False,
    },
    {
        "slug": "natural-gas",
        "title": "Natural Gas Certification Prep",
        "description": (
            "Preparation for Louisiana natural gas certification covering safety protocols, "
            "installation procedures and state regulations for natural gas systems."
        ),
        "course_type": "natural_gas",
        "price": 34.99,
        "duration_hours": 6,
        "lesson_count": 10,
        "practice_test_count": 4,
        "is_active": False,
    },
    {
        "slug": "medical-gas",
        "title": "Medical Gas Installer Certification",
        "description": (
            "Certification preparation for medical gas systems including oxygen, nitrous "
            "oxide and vacuum systems in healthcare facilities."
        ),
        "course_type": "medical_gas",
        "price": 44.99,
        "duration_hours": 10,
        "lesson_count": 15,
        "practice_test_count": 6,
        "is_active": False,
    },
    {
        "slug": "master-plumber",
        "title": "Louisiana Master Plumber Prep",
        "description": (
            "Advanced preparation for the Louisiana master plumber license covering business "
            "practices, advanced code knowledge and supervisory responsibilities."
        ),
        "course_type": "master",
        "price": 59.99,
        "duration_hours": 20,
        "lesson_count": 25,
        "practice_test_count": 12,
        "is_active": False,
    },
]

ACHIEVEMENT_CATALOG: list[dict[str, Any]] = [
    {
        "key": "knowledge_seeker",
        "name": "Knowledge Seeker",
        "description": "Answer 100 practice questions correctly",
        "category": "knowledge",
        "icon": "book",
        "point_value": 300,
    },
    {
        "key": "community_member",
        "name": "Community Member",
        "description": "Register and complete your profile",
        "category": "community",
        "icon": "users",
        "point_value": 50,
    },
]


def seed_courses(db: Session) -> int:
    """Insert the catalogue when no course exists yet. Returns the number added."""
    repo = CourseRepository(db)
    if repo.count() > 0:
        return 0
    for course in COURSE_CATALOG:
        repo.create(**course)
    db.commit()
    logger.info(f"Seeded {len(COURSE_CATALOG)} courses")
    return len(COURSE_CATALOG)


def seed_achievements(db: Session) -> int:
    """Insert the achievement catalogue when it is empty. Returns the number added."""
    repo = AchievementRepository(db)
    if repo.count() > 0:
        return 0
    for achievement in ACHIEVEMENT_CATALOG:
        repo.create(**achievement)
    db.commit()
    logger.info(f"Seeded {len(ACHIEVEMENT_CATALOG)} achievements")
    return len(ACHIEVEMENT_CATALOG)
