"""HTTP client for the RPC procedures and the PDF parse endpoint.

The UI talks to the API only through this client. Error messages from the
server are raised as ApiError so the page can show them as notifications.
"""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter

from career_bot.models.schemas import (
    AuthResponse,
    ChatOut,
    ChatWithMessages,
    MessageOut,
    ParsedPDFResponse,
    PublicUser,
    SendMessageResponse,
    StatusUpdate,
)

logger = logging.getLogger(__name__)

_CHAT_LIST = TypeAdapter(list[ChatWithMessages])
_MESSAGE_LIST = TypeAdapter(list[MessageOut])


class ApiError(Exception):
    """Raised when the API answers with an error status or is unreachable."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"

    if isinstance(body, dict):
        if isinstance(body.get("error"), str):
            return body["error"]
        detail = body.get("detail")
        if isinstance(detail, str):
            return detail
        if isinstance(detail, list):
            # FastAPI validation errors
            messages = [str(item.get("msg", "")).removeprefix("Value error, ") for item in detail]
            return "; ".join(m for m in messages if m) or f"HTTP {response.status_code}"
    return f"HTTP {response.status_code}"


class CareerBotClient:
    """Async client for the Career Bot API.

    Args:
        base_url: API root, e.g. ``http://localhost:8000``.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        )

    async def _send(self, method: str, path: str, **kwargs: Any) -> Any:
        async with self._http() as client:
            try:
                response = await client.request(method, path, **kwargs)
            except httpx.RequestError as e:
                raise ApiError(f"Connection failed: {e}") from e

        if response.is_error:
            raise ApiError(_error_message(response), response.status_code)
        return response.json()

    async def _call(self, procedure: str, payload: BaseModel | dict[str, Any]) -> Any:
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(by_alias=True)
        return await self._send("POST", f"/rpc/{procedure}", json=payload)

    # === Auth ===

    async def signup(self, email: str, password: str, name: str | None = None) -> AuthResponse:
        data = await self._call("signup", {"email": email, "password": password, "name": name})
        return AuthResponse.model_validate(data)

    async def signin(self, email: str, password: str) -> AuthResponse:
        data = await self._call("signin", {"email": email, "password": password})
        return AuthResponse.model_validate(data)

    async def get_current_user(self, token: str) -> PublicUser:
        return PublicUser.model_validate(await self._call("getCurrentUser", {"token": token}))

    async def update_user(self, user_id: str, email: str, name: str | None = None) -> PublicUser:
        data = await self._call("updateUser", {"id": user_id, "email": email, "name": name})
        return PublicUser.model_validate(data)

    async def get_user_by_id(self, user_id: str) -> PublicUser | None:
        data = await self._call("getUserById", {"userId": user_id})
        return PublicUser.model_validate(data) if data else None

    # === Chats ===

    async def create_chat(self, user_id: str, title: str | None = None) -> ChatOut:
        data = await self._call("createChat", {"userId": user_id, "title": title})
        return ChatOut.model_validate(data)

    async def get_chats(self, user_id: str) -> list[ChatWithMessages]:
        return _CHAT_LIST.validate_python(await self._call("getChats", {"userId": user_id}))

    async def get_messages(self, chat_id: str) -> list[MessageOut]:
        return _MESSAGE_LIST.validate_python(await self._call("getMessages", {"chatId": chat_id}))

    async def send_message(self, chat_id: str, content: str, user_id: str) -> SendMessageResponse:
        data = await self._call(
            "sendMessage", {"chatId": chat_id, "content": content, "userId": user_id}
        )
        return SendMessageResponse.model_validate(data)

    async def update_message_status(self, message_id: str, status: StatusUpdate) -> MessageOut:
        data = await self._call(
            "updateMessageStatus", {"messageId": message_id, "status": status}
        )
        return MessageOut.model_validate(data)

    # === PDF ===

    async def parse_pdf(
        self, filename: str, content: bytes, content_type: str = "application/pdf"
    ) -> ParsedPDFResponse:
        data = await self._send(
            "POST",
            "/api/parse-pdf",
            files={"file": (filename, content, content_type)},
        )
        return ParsedPDFResponse.model_validate(data)
