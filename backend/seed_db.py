"""
HeyHR Database Seeder

Creates demo data:
- A recruiter (Sarah Chen) with a published and a draft job
- Two candidates, one of whom has applied and has an interview scheduled
- A few notifications for both sides
"""

from datetime import date, timedelta

from app.core.config import settings
from app.core.security import get_password_hash
from app.crud import applications as applications_crud
from app.crud import notifications as notifications_crud
from app.crud import profiles as profiles_crud
from app.crud import users as users_crud
from app.db.base import utcnow
from app.db.session import Database
from app.models import Job
from app.models.enums import (
    ApplicationSource,
    ApplicationStatus,
    JobStatus,
    JobType,
    NotificationType,
    Role,
)

DEFAULT_PASSWORD = "Passw0rd!"


def seed_database(database_url: str = settings.DATABASE_URL) -> None:
    """Seed the database with demo data."""
    database = Database(database_url)
    database.create_all()
    db = database.session()

    try:
        # Check if already seeded
        if users_crud.get_user_by_email(db, "recruiter@heyhr.dev"):
            print("Database already seeded. Skipping...")
            return

        print("Seeding database...")
        password_hash = get_password_hash(DEFAULT_PASSWORD)

        # 1. Recruiter
        recruiter = users_crud.create_user(
            db,
            email="recruiter@heyhr.dev",
            password_hash=password_hash,
            role=Role.RECRUITER,
            name="Sarah Chen",
            phone="+1 555 0100",
        )
        profiles_crud.upsert_recruiter_profile(
            db,
            recruiter.id,
            {
                "first_name": "Sarah",
                "last_name": "Chen",
                "company_name": "Acme Robotics",
                "position": "Talent Lead",
            },
        )

        # 2. Candidates
        john = users_crud.create_user(
            db,
            email="john.doe@example.com",
            password_hash=password_hash,
            role=Role.CANDIDATE,
            name="John Doe",
        )
        profiles_crud.upsert_candidate_profile(
            db,
            john.id,
            {
                "first_name": "John",
                "last_name": "Doe",
                "career_objective": "Backend engineer who enjoys building reliable APIs.",
                "education": [
                    {"degree": "B.S. Computer Science", "institution": "MIT", "graduation_year": 2020}
                ],
                "experience": [
                    {"position": "Software Engineer", "company": "Initech", "duration": "4 years"}
                ],
            },
        )

        jane = users_crud.create_user(
            db,
            email="jane.smith@example.com",
            password_hash=password_hash,
            role=Role.CANDIDATE,
            name="Jane Smith",
        )
        profiles_crud.upsert_candidate_profile(db, jane.id, {"first_name": "Jane", "last_name": "Smith"})

        # 3. Jobs
        backend_job = Job(
            recruiter_id=recruiter.id,
            title="Backend Engineer",
            company_name="Acme Robotics",
            location="Remote",
            remote_flexible=True,
            job_type=JobType.FULL_TIME,
            salary=120000,
            interview_duration=60,
            commencement_date=date.today() + timedelta(days=45),
            intro="Build the APIs that keep our robots moving.",
            description="Build the APIs that keep our robots moving.\nYou will own services end to end.",
            responsibilities=["Design REST APIs", "Operate production services"],
            requirements=["3+ years of Python", "SQL"],
            skills_technical=[{"name": "Python", "weight": 80}, {"name": "SQL", "weight": 60}],
            skills_soft=[{"name": "Communication", "weight": 50}],
            status=JobStatus.PUBLISHED,
        )
        draft_job = Job(
            recruiter_id=recruiter.id,
            title="Data Analyst",
            company_name="Acme Robotics",
            location="Berlin",
            job_type=JobType.CONTRACT,
            status=JobStatus.DRAFT,
        )
        db.add_all([backend_job, draft_job])
        db.commit()

        # 4. John's application with an interview
        application = applications_crud.create_application(
            db,
            job_id=backend_job.id,
            candidate_id=john.id,
            source=ApplicationSource.APPLY,
            cover_letter="I'd love to help build your platform.",
        )
        applications_crud.update_application(
            db, application, {"status": ApplicationStatus.PASSED, "score": 82, "tags": ["python"]}
        )
        scheduled_at = utcnow().replace(microsecond=0) + timedelta(days=3)
        applications_crud.create_interview(
            db,
            application.id,
            {"scheduled_at": scheduled_at, "duration_minutes": 60, "meeting_url": "https://meet.example.com/abc"},
        )

        # 5. Notifications
        notifications_crud.create_notification(
            db,
            user_id=recruiter.id,
            type=NotificationType.JOB,
            title="Job published",
            message=f'Your job "{backend_job.title}" was approved and published.',
            data={"job_id": backend_job.id, "path": f"/recruiter/jobs/{backend_job.id}"},
        )
        notifications_crud.create_notification(
            db,
            user_id=john.id,
            type=NotificationType.INTERVIEW,
            title="Interview scheduled",
            message=f"Your interview for {backend_job.title} is scheduled at {scheduled_at.isoformat()}.",
            data={
                "job_id": backend_job.id,
                "application_id": application.id,
                "scheduled_at": scheduled_at.isoformat(),
                "path": f"/candidate/applications/{application.id}",
            },
        )

        print("✅ Database seeded successfully!")
        print(f"\n📋 Created Users (password: {DEFAULT_PASSWORD}):")
        print("   - recruiter@heyhr.dev [RECRUITER]")
        print("   - john.doe@example.com [CANDIDATE, applied + interview]")
        print("   - jane.smith@example.com [CANDIDATE]")

    except Exception as e:
        db.rollback()
        print(f"❌ Error seeding database: {e}")
        raise
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    seed_database()
