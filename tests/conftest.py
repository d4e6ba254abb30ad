"""Pytest configuration and fixtures."""

import json
import os
from collections.abc import Generator
from dataclasses import replace
from datetime import timedelta
from typing import Any

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("COOKIE_SECURE", "false")
os.environ.setdefault("STRIPE_BASIC_PRICE_ID", "price_basic")
os.environ.setdefault("STRIPE_PROFESSIONAL_PRICE_ID", "price_professional")
os.environ.setdefault("STRIPE_MASTER_PRICE_ID", "price_master")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from plumbprep import models  # noqa: E402
from plumbprep.database import Base, get_db  # noqa: E402
from plumbprep.exceptions import ValidationError  # noqa: E402
from plumbprep.main import app  # noqa: E402
from plumbprep.services.auth_service import (  # noqa: E402
    get_current_user,
    get_current_user_for_beacon,
    hash_password,
)
from plumbprep.services.billing import (  # noqa: E402
    PaymentIntentInfo,
    SubscriptionInfo,
    WebhookEvent,
    get_billing_gateway,
)
from plumbprep.utils import utc_now  # noqa: E402

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

# Create test engine
test_engine = create_engine(
    TEST_DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool
)

# Create test session factory
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

TEST_PASSWORD = "plumbing123"  # noqa: S105
VALID_WEBHOOK_SIGNATURE = "t=1,v1=valid"


class FakeBillingGateway:
    """In-memory stand-in for StripeBillingGateway."""

    def __init__(self) -> None:
        self.customers: list[tuple[str, str | None]] = []
        self.subscriptions: dict[str, SubscriptionInfo] = {}
        self.payment_intents: list[tuple[int, dict[str, str]]] = []

    def create_customer(self, email: str, name: str | None = None) -> str:
        self.customers.append((email, name))
        return f"cus_test_{len(self.customers)}"

    def create_subscription(
        self, customer_id: str, price_id: str, first_month_discount: bool = True
    ) -> SubscriptionInfo:
        number = len(self.subscriptions) + 1
        info = SubscriptionInfo(
            id=f"sub_test_{number}",
            status="incomplete",
            customer_id=customer_id,
            price_id=price_id,
            item_id=f"si_test_{number}",
            current_period_end=utc_now() + timedelta(days=30),
            client_secret=f"pi_test_{number}_secret",
        )
        self.subscriptions[info.id] = info
        return info

    def retrieve_subscription(self, subscription_id: str) -> SubscriptionInfo:
        return self.subscriptions[subscription_id]

    def cancel_at_period_end(self, subscription_id: str) -> SubscriptionInfo:
        info = replace(self.subscriptions[subscription_id], cancel_at_period_end=True)
        self.subscriptions[subscription_id] = info
        return info

    def change_price(
        self, subscription_id: str, item_id: str | None, new_price_id: str
    ) -> SubscriptionInfo:
        info = replace(self.subscriptions[subscription_id], price_id=new_price_id, status="active")
        self.subscriptions[subscription_id] = info
        return info

    def create_payment_intent(
        self, amount_cents: int, metadata: dict[str, str] | None = None
    ) -> PaymentIntentInfo:
        self.payment_intents.append((amount_cents, metadata or {}))
        number = len(self.payment_intents)
        return PaymentIntentInfo(
            id=f"pi_test_{number}", client_secret=f"pi_test_{number}_secret", amount=amount_cents
        )

    def parse_webhook(self, payload: bytes, signature: str | None) -> WebhookEvent:
        if signature != VALID_WEBHOOK_SIGNATURE:
            raise ValidationError("Webhook signature verification failed")
        event = json.loads(payload)
        return WebhookEvent(type=event["type"], data=event["data"]["object"])


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    # Create all tables
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def test_user(db_session: Session) -> models.User:
    """Default authenticated user (id=1) on the basic plan."""
    return create_test_user(db_session, email="learner@example.com", username="learner")


@pytest.fixture
def billing_gateway() -> FakeBillingGateway:
    return FakeBillingGateway()


@pytest.fixture
def client(
    db_session: Session, test_user: models.User, billing_gateway: FakeBillingGateway
) -> Generator[TestClient, Any, None]:
    """Create a test client authenticated as ``test_user``."""

    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: test_user
    app.dependency_overrides[get_current_user_for_beacon] = lambda: test_user
    app.dependency_overrides[get_billing_gateway] = lambda: billing_gateway

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(db_session: Session) -> Generator[TestClient, Any, None]:
    """Test client that goes through real token authentication."""

    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db_session: Session, test_user: models.User) -> models.User:
    """Promote the default user to admin."""
    test_user.is_admin = True
    db_session.commit()
    return test_user


def set_subscription(
    db_session: Session,
    user: models.User,
    tier: str,
    status: str | None = "active",
    subscription_id: str | None = "sub_existing",
) -> models.User:
    """Put a user on a plan without going through Stripe."""
    user.subscription_tier = tier
    user.subscription_status = status
    user.stripe_subscription_id = subscription_id
    db_session.commit()
    db_session.refresh(user)
    return user


def create_test_user(
    db_session: Session,
    email: str = "user@example.com",
    username: str | None = "user",
    password: str = TEST_PASSWORD,
    subscription_tier: str = "basic",
    referral_code: str | None = None,
    referred_by_id: int | None = None,
    **fields: Any,  # noqa: ANN401
) -> models.User:
    """Helper function to create a user."""
    user = models.User(
        email=email,
        username=username,
        hashed_password=hash_password(password),
        subscription_tier=subscription_tier,
        referral_code=referral_code,
        referred_by_id=referred_by_id,
        **fields,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def create_test_course(
    db_session: Session,
    slug: str = "journeyman-prep",
    title: str = "Louisiana Journeyman Prep",
    course_type: str = "journeyman",
    is_active: bool = True,
    **fields: Any,  # noqa: ANN401
) -> models.Course:
    """Helper function to create a course."""
    course = models.Course(
        slug=slug,
        title=title,
        course_type=course_type,
        is_active=is_active,
        **fields,
    )
    db_session.add(course)
    db_session.commit()
    db_session.refresh(course)
    return course


def create_test_content(
    db_session: Session,
    course: models.Course,
    title: str = "Water Supply Basics",
    content_type: str = "lesson",
    chapter: int | None = 1,
    section: int | None = 101,
    sort_order: int = 0,
    **fields: Any,  # noqa: ANN401
) -> models.CourseContent:
    """Helper function to create course content."""
    content = models.CourseContent(
        course_id=course.id,
        title=title,
        content_type=content_type,
        chapter=chapter,
        section=section,
        sort_order=sort_order,
        **fields,
    )
    db_session.add(content)
    db_session.commit()
    db_session.refresh(content)
    return content


def create_test_enrollment(
    db_session: Session, user: models.User, course: models.Course
) -> models.CourseEnrollment:
    """Helper function to enroll a user in a course."""
    enrollment = models.CourseEnrollment(
        user_id=user.id, course_id=course.id, completed_lessons=[], test_scores={}
    )
    db_session.add(enrollment)
    db_session.commit()
    db_session.refresh(enrollment)
    return enrollment


def create_test_employer(
    db_session: Session,
    owner: models.User,
    company_name: str = "Bayou Plumbing Co",
    contact_email: str = "hiring@bayouplumbing.com",
    **fields: Any,  # noqa: ANN401
) -> models.Employer:
    """Helper function to create an employer."""
    employer = models.Employer(
        owner_id=owner.id,
        company_name=company_name,
        contact_name=fields.pop("contact_name", "Marie Thibodeaux"),
        contact_email=contact_email,
        **fields,
    )
    db_session.add(employer)
    db_session.commit()
    db_session.refresh(employer)
    return employer


def create_test_job(
    db_session: Session,
    employer: models.Employer | None = None,
    title: str = "Journeyman Plumber",
    status: str = "approved",
    is_active: bool = True,
    **fields: Any,  # noqa: ANN401
) -> models.Job:
    """Helper function to create a job posting."""
    job = models.Job(
        employer_id=employer.id if employer else None,
        title=title,
        company=fields.pop("company", employer.company_name if employer else "Bayou Plumbing Co"),
        location=fields.pop("location", "Baton Rouge, LA"),
        description=fields.pop("description", "Residential and light commercial service work."),
        job_type=fields.pop("job_type", "full_time"),
        requirements=fields.pop("requirements", ["Louisiana journeyman license"]),
        benefits=fields.pop("benefits", []),
        status=status,
        is_active=is_active,
        **fields,
    )
    db_session.add(job)
    db_session.commit()
    db_session.refresh(job)
    return job


def create_test_product(
    db_session: Session,
    name: str = "Pipe Wrench 18in",
    category: str = "tools",
    price: float = 29.99,
    **fields: Any,  # noqa: ANN401
) -> models.Product:
    """Helper function to create a store product."""
    product = models.Product(name=name, category=category, price=price, **fields)
    db_session.add(product)
    db_session.commit()
    db_session.refresh(product)
    return product
