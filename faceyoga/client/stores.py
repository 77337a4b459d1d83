import logging
from typing import Awaitable, Callable, Dict, List, Optional, TypeVar

import httpx

from faceyoga.client.api import FaceYogaClient
from faceyoga.client.errors import ClientError
from faceyoga.client.session import AuthSessionProvider
from faceyoga.core.constants import AuthEventEnum
from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.course import CourseDetail
from faceyoga.schemas.goal import GoalMilestone, GoalProgress
from faceyoga.schemas.history import ExerciseHistory, LessonCompletionResult, LessonHistory

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseStore:
    """State holder fed by explicit fetches.

    ``loading`` is true while a fetch runs and ``error`` keeps the message of the
    last failed one. All state is dropped when the user signs out.
    """

    def __init__(self, client: FaceYogaClient, provider: AuthSessionProvider):
        self.client = client
        self.loading = False
        self.error: Optional[str] = None
        self._unsubscribe = provider.subscribe(self._on_auth_event)

    def _on_auth_event(self, event: AuthEventEnum, session: Optional[AuthSession]) -> None:
        if event == AuthEventEnum.SIGNED_OUT:
            self.clear()

    def clear(self) -> None:
        self.loading = False
        self.error = None

    def close(self) -> None:
        self._unsubscribe()

    async def _run(self, fetch: Callable[[], Awaitable[T]]) -> Optional[T]:
        self.loading = True
        self.error = None
        try:
            return await fetch()
        except (ClientError, httpx.HTTPError) as e:
            self.error = str(e)
            logger.warning(f"{type(self).__name__} fetch failed: {e}")
            return None
        finally:
            self.loading = False


class CourseStore(BaseStore):

    def __init__(self, client: FaceYogaClient, provider: AuthSessionProvider):
        super().__init__(client, provider)
        self.courses: List[CourseDetail] = []
        self.current_course: Optional[CourseDetail] = None
        self.access: Dict[int, bool] = {}

    def clear(self) -> None:
        super().clear()
        self.courses = []
        self.current_course = None
        self.access = {}

    async def fetch_courses(self) -> List[CourseDetail]:
        courses = await self._run(self.client.list_courses)
        if courses is not None:
            self.courses = courses
        return self.courses

    async def fetch_course(self, course_id: int) -> Optional[CourseDetail]:
        course = await self._run(lambda: self.client.get_course(course_id))
        if course is not None:
            self.current_course = course
            if course.has_access is not None:
                self.access[course_id] = course.has_access
        return course

    async def check_access(self, course_id: int) -> bool:
        allowed = await self._run(lambda: self.client.has_course_access(course_id))
        if allowed is None:
            return False
        self.access[course_id] = allowed
        return allowed


class GoalProgressStore(BaseStore):

    def __init__(self, client: FaceYogaClient, provider: AuthSessionProvider):
        super().__init__(client, provider)
        self.progress: Dict[int, GoalProgress] = {}
        self.milestones: Dict[int, List[GoalMilestone]] = {}

    def clear(self) -> None:
        super().clear()
        self.progress = {}
        self.milestones = {}

    def apply(self, rows: List[GoalProgress]) -> None:
        for row in rows:
            self.progress[row.goal_id] = row

    async def fetch_progress(self) -> Dict[int, GoalProgress]:
        rows = await self._run(self.client.get_goal_progress)
        if rows is not None:
            self.progress = {row.goal_id: row for row in rows}
        return self.progress

    async def fetch_milestones(self, goal_id: int) -> List[GoalMilestone]:
        milestones = await self._run(lambda: self.client.get_goal_milestones(goal_id))
        if milestones is not None:
            self.milestones[goal_id] = milestones
        return self.milestones.get(goal_id, [])

    async def contribute(self, goal_id: int, weight: float) -> Optional[GoalProgress]:
        row = await self._run(lambda: self.client.apply_contribution(goal_id, weight))
        if row is not None:
            self.apply([row])
        return row


class HistoryStore(BaseStore):

    def __init__(
        self,
        client: FaceYogaClient,
        provider: AuthSessionProvider,
        goal_store: Optional[GoalProgressStore] = None,
    ):
        super().__init__(client, provider)
        self.goal_store = goal_store
        self.exercises: List[ExerciseHistory] = []
        self.lessons: List[LessonHistory] = []
        self.streak = 0

    def clear(self) -> None:
        super().clear()
        self.exercises = []
        self.lessons = []
        self.streak = 0

    async def fetch_history(self) -> None:
        exercises = await self._run(self.client.get_exercise_history)
        if exercises is not None:
            self.exercises = exercises
        first_error = self.error
        lessons = await self._run(self.client.get_lesson_history)
        if lessons is not None:
            self.lessons = lessons
        self.error = self.error or first_error

    async def complete_exercise(self, exercise_id: int, duration: int = 0) -> Optional[ExerciseHistory]:
        entry = await self._run(lambda: self.client.complete_exercise(exercise_id, duration))
        if entry is not None:
            self.exercises.insert(0, entry)
        return entry

    async def complete_lesson(self, lesson_id: int, practice_time: int = 0) -> Optional[LessonCompletionResult]:
        result = await self._run(lambda: self.client.complete_lesson(lesson_id, practice_time))
        if result is not None:
            self.lessons.insert(0, result.history)
            self.streak = result.streak
            if self.goal_store is not None:
                self.goal_store.apply(result.goal_progress)
        return result
