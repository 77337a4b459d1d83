from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_users: int
    total_exercises: int
    total_lessons: int
    total_courses: int
    total_completions: int
    active_grants: int
    total_revenue: float
