import inspect
import logging
from typing import Any, Callable, List, Optional

from faceyoga.core.constants import AuthEventEnum
from faceyoga.schemas.auth import AuthSession

logger = logging.getLogger(__name__)

AuthListener = Callable[[AuthEventEnum, Optional[AuthSession]], Any]


class AuthSessionProvider:
    """Holds the current session and notifies listeners when it changes.

    Listeners may be plain callables or coroutine functions; they receive the
    event and the new session (``None`` after sign-out).
    """

    def __init__(self, session: Optional[AuthSession] = None):
        self._session = session
        self._listeners: List[AuthListener] = []

    def get_session(self) -> Optional[AuthSession]:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: AuthListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def sign_in(self, session: AuthSession) -> None:
        self._session = session
        await self._publish(AuthEventEnum.SIGNED_IN, session)

    async def sign_out(self) -> None:
        self._session = None
        await self._publish(AuthEventEnum.SIGNED_OUT, None)

    async def _publish(self, event: AuthEventEnum, session: Optional[AuthSession]) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(event, session)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                name = getattr(listener, "__name__", repr(listener))
                logger.error(f"Error in auth listener {name} for {event.value}: {e}")
