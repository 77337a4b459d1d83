from enum import Enum


class RoleEnum(str, Enum):
    USER = "user"
    ADMIN = "admin"

class ExperienceLevelEnum(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

class DifficultyEnum(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"

class ExerciseCategoryEnum(str, Enum):
    FACE = "face"
    NECK = "neck"
    EYES = "eyes"
    FOREHEAD = "forehead"
    CHEEKS = "cheeks"

class ContentKindEnum(str, Enum):
    EXERCISE = "exercise"
    LESSON = "lesson"

class AccessTypeEnum(str, Enum):
    LIFETIME = "lifetime"
    SUBSCRIPTION = "subscription"
    TRIAL = "trial"

class PurchaseStatusEnum(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"

class SubscriptionStatusEnum(str, Enum):
    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    EXPIRED = "expired"

class GoalStatusEnum(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PAUSED = "paused"

class UnmappedPremiumPolicy(str, Enum):
    DENY = "deny"
    ALLOW = "allow"

class AuthEventEnum(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
