import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

os.environ.setdefault("AUTH_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_dummy")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("LOG_TO_FILE", "false")

import uuid
from datetime import datetime
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from faceyoga.core.config import settings
from faceyoga.core.constants import AccessTypeEnum, ExerciseCategoryEnum, RoleEnum
from faceyoga.core.database import Base, get_db
from faceyoga.models.course import Course, CourseSection, SectionExercise
from faceyoga.models.exercise import Exercise
from faceyoga.models.feedback import Feedback  # noqa: F401
from faceyoga.models.goal import Goal, GoalMilestone, LessonGoalMapping
from faceyoga.models.history import ExerciseHistory  # noqa: F401
from faceyoga.models.lesson import Lesson
from faceyoga.models.profile import Profile
from faceyoga.models.progress_photo import ProgressPhoto  # noqa: F401
from faceyoga.models.purchase import CourseAccess
from faceyoga.models.subscription import UserSubscription  # noqa: F401
from faceyoga.schemas.auth import AuthSession
from faceyoga.utils import deps as deps_utils
import main
from tests.helpers.tokens import issue_token

test_db_url = settings.TEST_DATABASE_URL or settings.DATABASE_URL

@pytest.fixture(scope="session")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(test_db_url, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(test_db_url)
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()
    if test_db_url == "sqlite:///./test.db" and os.path.exists("./test.db"):
        os.remove("./test.db")

@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()

@pytest.fixture(scope="function")
def client(db_session):
    from importlib import reload
    reload(main)
    main.app.dependency_overrides[get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client


@pytest.fixture
def session_factory():
    def _session_factory(email=None):
        user_id = f"user-{uuid.uuid4().hex}"
        email = email or f"{user_id}@test.com"
        return AuthSession(user_id=user_id, email=email, access_token=issue_token(user_id, email=email))
    return _session_factory

@pytest.fixture
def user_session(session_factory):
    return session_factory()

@pytest.fixture
def admin_session(session_factory, db_session):
    session = session_factory()
    db_session.add(Profile(user_id=session.user_id, email=session.email, username="admin", role=RoleEnum.ADMIN))
    db_session.commit()
    return session

@pytest.fixture
def exercise_factory(db_session):
    def _exercise_factory(is_premium=False, category=ExerciseCategoryEnum.FACE, title=None):
        exercise = Exercise(
            title=title or f"Exercise {uuid.uuid4().hex[:6]}",
            description="Lift and hold",
            duration="5 min",
            target_area="Cheeks",
            image_url="https://img.example.com/e.png",
            video_url="https://video.example.com/e.mp4",
            category=category.value,
            difficulty="Beginner",
            instructions=["Smile", "Hold"],
            benefits=["Tone"],
            is_premium=is_premium,
        )
        db_session.add(exercise)
        db_session.commit()
        db_session.refresh(exercise)
        return exercise
    return _exercise_factory

@pytest.fixture
def lesson_factory(db_session):
    def _lesson_factory(is_premium=False, category=None):
        lesson = Lesson(
            title=f"Lesson {uuid.uuid4().hex[:6]}",
            description="Guided routine",
            duration=10,
            video_url="https://video.example.com/l.mp4",
            category=category,
            is_premium=is_premium,
        )
        db_session.add(lesson)
        db_session.commit()
        db_session.refresh(lesson)
        return lesson
    return _lesson_factory

@pytest.fixture
def course_factory(db_session):
    def _course_factory(
        price=19.99,
        exercises=(),
        lessons=(),
        access_type=AccessTypeEnum.LIFETIME,
        trial_duration_days=None,
        subscription_duration_months=None,
    ):
        course = Course(
            title=f"Course {uuid.uuid4().hex[:6]}",
            price=price,
            currency="usd",
            access_type=access_type,
            trial_duration_days=trial_duration_days,
            subscription_duration_months=subscription_duration_months,
        )
        section = CourseSection(title="Week 1", order_index=0)
        order = 0
        for exercise in exercises:
            section.items.append(SectionExercise(exercise_id=exercise.id, order_index=order))
            order += 1
        for lesson in lessons:
            section.items.append(SectionExercise(lesson_id=lesson.id, order_index=order))
            order += 1
        course.sections = [section]
        db_session.add(course)
        db_session.commit()
        db_session.refresh(course)
        return course
    return _course_factory

@pytest.fixture
def grant_factory(db_session):
    def _grant_factory(user_id, course, expires_at=None):
        grant = CourseAccess(
            user_id=user_id,
            course_id=course.id,
            access_type=course.access_type,
            starts_at=datetime.utcnow(),
            expires_at=expires_at,
        )
        db_session.add(grant)
        db_session.commit()
        db_session.refresh(grant)
        return grant
    return _grant_factory

@pytest.fixture
def goal_factory(db_session):
    def _goal_factory(targets=(10, 25, 50), lesson_weights=()):
        goal = Goal(label=f"Goal {uuid.uuid4().hex[:6]}")
        goal.milestones = [GoalMilestone(label=f"Reach {t}", target_value=t) for t in targets]
        goal.lesson_mappings = [
            LessonGoalMapping(lesson_id=lesson.id, contribution_weight=weight)
            for lesson, weight in lesson_weights
        ]
        db_session.add(goal)
        db_session.commit()
        db_session.refresh(goal)
        return goal
    return _goal_factory
