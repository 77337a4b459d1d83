import asyncio
from typing import Any, Dict, List, Optional

import httpx

from faceyoga.client.errors import ApiError, NotAuthenticatedError
from faceyoga.client.retry import Sleep, retry_operation
from faceyoga.client.session import AuthSessionProvider
from faceyoga.core.constants import GoalStatusEnum
from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.course import CourseDetail
from faceyoga.schemas.exercise import Exercise, ExerciseDetail
from faceyoga.schemas.goal import GoalMilestone, GoalProgress
from faceyoga.schemas.history import ExerciseHistory, LessonCompletionResult, LessonHistory
from faceyoga.schemas.lesson import Lesson, LessonDetail
from faceyoga.schemas.profile import Profile, ProfileUpdate
from faceyoga.schemas.purchase import CourseAccess, CoursePurchase, PaymentIntentResponse


class FaceYogaClient:
    """Async client for the Face Yoga API.

    Reads go through ``retry_operation``; writes are attempted once so that a
    timed-out write is never replayed blindly.
    """

    def __init__(
        self,
        base_url: str,
        provider: AuthSessionProvider,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
        max_retries: Optional[int] = None,
        base_delay: Optional[float] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.provider = provider
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        self._retry_options = {"max_retries": max_retries, "base_delay": base_delay, "sleep": sleep}

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.status_code < 400:
            return
        code = None
        message = response.reason_phrase
        try:
            error = response.json().get("error") or {}
            code = error.get("code")
            message = error.get("message") or message
        except ValueError:
            pass
        raise ApiError(response.status_code, message, code)

    async def _send(self, session: AuthSession, method: str, path: str, **kwargs) -> Any:
        headers = {"Authorization": f"Bearer {session.access_token}"}
        response = await self._client.request(method, path, headers=headers, **kwargs)
        self._raise_for_status(response)
        return response.json().get("data")

    async def _read(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        async def operation(session: AuthSession):
            return await self._send(session, "GET", path, params=params)
        return await retry_operation(operation, self.provider, **self._retry_options)

    async def _write(self, method: str, path: str, **kwargs) -> Any:
        session = self.provider.get_session()
        if session is None:
            raise NotAuthenticatedError()
        return await self._send(session, method, path, **kwargs)

    async def list_exercises(self, category: Optional[str] = None, page: int = 1) -> List[Exercise]:
        params: Dict[str, Any] = {"page": page}
        if category:
            params["category"] = category
        data = await self._read("/exercises", params=params)
        return [Exercise.model_validate(e) for e in data]

    async def get_exercise(self, exercise_id: int) -> ExerciseDetail:
        return ExerciseDetail.model_validate(await self._read(f"/exercises/{exercise_id}"))

    async def list_lessons(self, category: Optional[str] = None, page: int = 1) -> List[Lesson]:
        params: Dict[str, Any] = {"page": page}
        if category:
            params["category"] = category
        data = await self._read("/lessons", params=params)
        return [Lesson.model_validate(l) for l in data]

    async def get_lesson(self, lesson_id: int) -> LessonDetail:
        return LessonDetail.model_validate(await self._read(f"/lessons/{lesson_id}"))

    async def list_courses(self) -> List[CourseDetail]:
        return [CourseDetail.model_validate(c) for c in await self._read("/courses")]

    async def get_course(self, course_id: int) -> CourseDetail:
        return CourseDetail.model_validate(await self._read(f"/courses/{course_id}"))

    async def has_access(self, kind: str, item_id: int) -> bool:
        data = await self._read(f"/access/{kind}s/{item_id}")
        return bool(data["has_access"])

    async def has_course_access(self, course_id: int) -> bool:
        data = await self._read(f"/access/courses/{course_id}")
        return bool(data["has_access"])

    async def get_goal_progress(self) -> List[GoalProgress]:
        return [GoalProgress.model_validate(p) for p in await self._read("/goals/progress")]

    async def get_goal_milestones(self, goal_id: int) -> List[GoalMilestone]:
        return [GoalMilestone.model_validate(m) for m in await self._read(f"/goals/{goal_id}/milestones")]

    async def apply_contribution(self, goal_id: int, weight: float) -> GoalProgress:
        data = await self._write("POST", f"/goals/{goal_id}/contributions", json={"weight": weight})
        return GoalProgress.model_validate(data)

    async def update_goal_status(self, goal_id: int, status: GoalStatusEnum) -> GoalProgress:
        data = await self._write("PUT", f"/goals/{goal_id}/status", json={"status": GoalStatusEnum(status).value})
        return GoalProgress.model_validate(data)

    async def complete_exercise(self, exercise_id: int, duration: int = 0) -> ExerciseHistory:
        data = await self._write("POST", f"/exercises/{exercise_id}/complete", json={"duration": duration})
        return ExerciseHistory.model_validate(data)

    async def complete_lesson(self, lesson_id: int, practice_time: int = 0) -> LessonCompletionResult:
        data = await self._write("POST", f"/lessons/{lesson_id}/complete", json={"practice_time": practice_time})
        return LessonCompletionResult.model_validate(data)

    async def get_exercise_history(self) -> List[ExerciseHistory]:
        return [ExerciseHistory.model_validate(e) for e in await self._read("/history/exercises")]

    async def get_lesson_history(self) -> List[LessonHistory]:
        return [LessonHistory.model_validate(e) for e in await self._read("/history/lessons")]

    async def get_profile(self) -> Profile:
        return Profile.model_validate(await self._read("/profile/me"))

    async def update_profile(self, profile_in: ProfileUpdate) -> Profile:
        data = await self._write("PUT", "/profile/me", json=profile_in.model_dump(mode="json", exclude_unset=True))
        return Profile.model_validate(data)

    async def create_payment_intent(self, course_id: int, amount: float) -> PaymentIntentResponse:
        data = await self._write("POST", "/payments/intent", json={"course_id": course_id, "amount": amount})
        return PaymentIntentResponse.model_validate(data)

    async def confirm_payment(self, course_id: int, payment_intent_id: str) -> CourseAccess:
        data = await self._write(
            "POST",
            "/payments/confirm",
            json={"course_id": course_id, "payment_intent_id": payment_intent_id},
        )
        return CourseAccess.model_validate(data)

    async def list_purchases(self) -> List[CoursePurchase]:
        return [CoursePurchase.model_validate(p) for p in await self._read("/payments/purchases")]

    async def submit_feedback(self, rating: int, message: Optional[str] = None) -> Dict[str, Any]:
        return await self._write("POST", "/feedback", json={"rating": rating, "message": message})
