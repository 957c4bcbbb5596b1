"""Seed script for demo data.

Running this script populates the database with a couple of demo users,
a public group, a challenge and a marketplace listing so that the API
has something to show. Run it with ``python -m seed.seed`` from the
repository root once the database exists.
"""
from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from wellnest import create_app, db
from wellnest.models import (
    ChallengeType,
    GroupCategory,
    MarketplaceCategory,
    PostVisibility,
    User,
    utcnow,
)
from wellnest.services import challenge_service, group_service, marketplace_service, post_service


def run_seeds() -> None:
    """Insert demo users and content into the database."""
    app = create_app()
    with app.app_context():
        db.create_all()
        coach = User(email="coach@example.com", name="Demo Coach", fitness_goal="Run a marathon")
        coach.set_password("password123")
        member = User(email="member@example.com", name="Demo Member", fitness_goal="Sleep better")
        member.set_password("password123")
        db.session.add_all([coach, member])
        db.session.commit()

        group_service.create_group(
            coach.id,
            {"name": "Morning Runners", "description": "Early miles, every day.", "category": GroupCategory.RUNNING},
        )
        challenge_service.create_challenge(
            coach.id,
            {
                "title": "10k Steps a Day",
                "description": "Walk at least ten thousand steps every day for two weeks.",
                "type": ChallengeType.STEPS,
                "goal": {"target": 10000, "unit": "steps"},
                "duration_days": 14,
                "start_date": utcnow().date() + timedelta(days=1),
                "is_public": True,
            },
        )
        post_service.create_post(
            member.id,
            {"content": "Joined the morning runners today!", "visibility": PostVisibility.PUBLIC},
        )
        marketplace_service.create_item(
            coach.id,
            {
                "title": "Beginner running plan",
                "description": "An eight week plan from couch to 5k.",
                "category": MarketplaceCategory.WORKOUT_PROGRAMS,
                "price": Decimal("19.99"),
                "available_slots": 100,
                "is_digital": True,
            },
        )
        print("Seed data inserted successfully.")


if __name__ == "__main__":
    run_seeds()
