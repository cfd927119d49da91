"""NiceGUI chat interface with auth, chat list, and message status ticks."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from nicegui import app, events, ui

from career_bot.agent.context import split_resume_context, with_resume_context
from career_bot.db.models import MessageStatus
from career_bot.models.schemas import ChatWithMessages, MessageOut, PublicUser
from career_bot.parsing.pdf_parser import PDF_CONTENT_TYPE
from career_bot.parsing.resume_sections import extract_resume_sections
from career_bot.ui.client import ApiError, CareerBotClient
from career_bot.ui.session import SessionStore, get_ui_config
from career_bot.ui.status import MessageStatusTracker

logger = logging.getLogger(__name__)

TITLE_LIMIT = 30

STARTER_PROMPTS = [
    ("description", "Resume writing for tech roles", "How to write a compelling resume for tech roles"),
    ("record_voice_over", "Interview preparation", "How should I prepare for a behavioral interview?"),
    ("payments", "Salary negotiation", "How do I negotiate a higher salary offer?"),
    ("swap_horiz", "Career transition", "How can I transition into a career in data science?"),
]

STATUS_ICONS: dict[MessageStatus, tuple[str, str]] = {
    MessageStatus.SENDING: ("schedule", "text-gray-400 animate-pulse"),
    MessageStatus.SENT: ("done", "text-blue-500"),
    MessageStatus.DELIVERED: ("done_all", "text-blue-300"),
    MessageStatus.READ: ("done_all", "text-blue-500"),
    MessageStatus.ERROR: ("error_outline", "text-red-500"),
}

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f5f5f5; min-height: 100vh; }

    .header { background: #000; }
    .accent { background: #CCFF01 !important; color: #000 !important; }

    .message-user {
        background: #111827;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .avatar-user { background: #111827; }
    .avatar-assistant { background: #CCFF01; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #6b7280;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 16px;
        transition: border-color 0.2s;
    }
    .input-box:focus-within { border-color: #9ca3af; }

    .chat-item { cursor: pointer; border-radius: 6px; }
    .chat-item:hover { background: rgba(204, 255, 1, 0.2); }
    .chat-item.selected { background: #374151; font-weight: 500; }
</style>
"""


@dataclass
class PendingMessage:
    """The optimistic copy of a message while the send is in flight."""

    content: str
    created_at: datetime
    has_resume: bool
    status: MessageStatus = MessageStatus.SENDING


@dataclass
class ChatState:
    """Per-page state for one signed-in browser tab."""

    user: PublicUser | None = None
    chats: list[ChatWithMessages] = field(default_factory=list)
    selected_chat_id: str | None = None
    messages: list[MessageOut] = field(default_factory=list)
    pending: PendingMessage | None = None
    # Displayed status per stored message id, driven by trackers
    live_status: dict[str, MessageStatus] = field(default_factory=dict)
    resume_text: str | None = None
    resume_name: str | None = None
    resume_highlights: str = ""
    is_sending: bool = False


def title_from_prompt(text: str) -> str:
    text = text.strip()
    return text if len(text) <= TITLE_LIMIT else text[:TITLE_LIMIT] + "..."


def resume_highlights(text: str) -> str:
    """Names of the resume sections found in the text, for the attachment bar."""
    sections = extract_resume_sections(text).model_dump()
    found = [name.title() for name, body in sections.items() if body and name != "contact"]
    return f"Found: {', '.join(found)}" if found else ""


def _format_time(value: datetime) -> str:
    # Naive values are UTC, the wire format carries no other zone
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone().strftime("%I:%M %p")


def render_avatar(is_user: bool) -> None:
    css = "avatar-user" if is_user else "avatar-assistant"
    icon = "person" if is_user else "smart_toy"
    color = "text-white" if is_user else "text-black"
    with ui.element("div").classes(f"w-9 h-9 rounded-full flex items-center justify-center {css}"):
        ui.icon(icon).classes(f"{color} text-lg")


def render_status(status: MessageStatus | None, created_at: datetime) -> None:
    with ui.row().classes("items-center gap-1 self-end"):
        ui.label(_format_time(created_at)).classes("text-[10px] text-gray-400")
        if status is not None:
            icon, css = STATUS_ICONS[status]
            ui.icon(icon).classes(f"text-xs {css}")


def render_bubble(
    role: str,
    content: str,
    created_at: datetime,
    status: MessageStatus | None = None,
    attached: bool = False,
) -> None:
    is_user = role == "user"
    align = "justify-end" if is_user else "justify-start"
    bubble = "message-user" if is_user else "message-assistant"

    with ui.row().classes(f"w-full {align} gap-3 items-end"):
        if not is_user:
            render_avatar(False)
        with ui.column().classes("max-w-[70%] gap-1"):
            with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                if is_user:
                    has_resume, typed = split_resume_context(content)
                    has_resume = has_resume or attached
                    if has_resume:
                        with ui.row().classes("items-center gap-1 text-xs opacity-70"):
                            ui.icon("attach_file").classes("text-xs")
                            ui.label("Resume attached")
                    ui.label(typed).classes("text-sm leading-relaxed whitespace-pre-wrap")
                else:
                    ui.markdown(content).classes("text-sm leading-relaxed")
            if is_user:
                render_status(status, created_at)
            else:
                ui.label(_format_time(created_at)).classes("text-[10px] text-gray-400 self-start")
        if is_user:
            render_avatar(True)


def render_typing_indicator() -> None:
    with ui.row().classes("w-full justify-start gap-3 items-end"):
        render_avatar(False)
        with ui.element("div").classes("message-assistant px-4 py-3"):
            with ui.row().classes("gap-1"):
                for _ in range(3):
                    ui.element("div").classes("typing-dot")


@ui.page("/")
async def chat_page() -> None:
    """Main page: auth form when signed out, chat workspace when signed in."""
    ui.add_head_html(CUSTOM_CSS)
    config = get_ui_config()
    client = CareerBotClient(config.api_base_url)
    store = SessionStore(app.storage.user)
    state = ChatState()
    dark = ui.dark_mode(False)

    root = ui.column().classes("w-full min-h-screen p-0 gap-0")

    # === Session ===

    def sign_in(user: PublicUser, token: str) -> None:
        store.save(user, token)
        ui.navigate.to("/")

    def sign_out(message: str = "Logged out successfully") -> None:
        store.clear()
        ui.notify(message, type="positive")
        ui.navigate.to("/")

    # === Auth form ===

    def show_auth() -> None:
        mode = {"signup": False}

        with root, ui.column().classes("w-full min-h-screen items-center justify-center p-4"):
            with ui.card().classes("w-full max-w-md p-8 gap-4"):
                with ui.row().classes("w-full items-center justify-center gap-3"):
                    with ui.element("div").classes(
                        "w-12 h-12 rounded-full flex items-center justify-center avatar-assistant"
                    ):
                        ui.icon("smart_toy").classes("text-black text-2xl")
                    ui.label("Career Bot").classes("text-2xl font-semibold")
                heading = ui.label().classes("text-sm text-gray-500 w-full text-center")

                name_input = ui.input("Name (optional)").classes("w-full")
                email_input = ui.input("Email").props("type=email").classes("w-full")
                password_input = ui.input(
                    "Password", password=True, password_toggle_button=True
                ).classes("w-full")
                submit_btn = ui.button().classes("w-full accent")
                toggle_btn = ui.button().props("flat").classes("w-full text-gray-600")

        def render_mode() -> None:
            signup = mode["signup"]
            heading.set_text("Create your account" if signup else "Sign in to continue")
            name_input.set_visibility(signup)
            submit_btn.set_text("Sign Up" if signup else "Sign In")
            toggle_btn.set_text(
                "Already have an account? Sign in" if signup else "Don't have an account? Sign up"
            )

        def toggle() -> None:
            mode["signup"] = not mode["signup"]
            render_mode()

        async def submit() -> None:
            email = (email_input.value or "").strip()
            password = password_input.value or ""
            if not email or not password:
                ui.notify("Please fill in all required fields", type="warning")
                return
            if mode["signup"] and len(password) < 6:
                ui.notify("Password must be at least 6 characters", type="warning")
                return

            submit_btn.disable()
            try:
                if mode["signup"]:
                    result = await client.signup(email, password, (name_input.value or "").strip() or None)
                    ui.notify("Account created successfully!", type="positive")
                else:
                    result = await client.signin(email, password)
                    ui.notify("Welcome back!", type="positive")
            except ApiError as e:
                ui.notify(e.message, type="negative")
                submit_btn.enable()
                return
            sign_in(result.user, result.token)

        submit_btn.on_click(submit)
        toggle_btn.on_click(toggle)
        password_input.on("keydown.enter", submit)
        render_mode()

    # === Workspace ===

    def show_workspace() -> None:
        messages_container: ui.column
        chat_list_container: ui.column
        input_field: ui.textarea
        send_btn: ui.button
        attachment_row: ui.row

        async def load_chats() -> None:
            assert state.user is not None
            try:
                state.chats = await client.get_chats(state.user.id)
            except ApiError as e:
                if e.status_code == 404:
                    # Cached user no longer exists
                    sign_out("Your session has expired. Please sign in again.")
                    return
                ui.notify(e.message, type="negative")
                return
            refresh_chat_list()

        async def load_messages() -> None:
            if state.selected_chat_id is None:
                state.messages = []
            else:
                try:
                    state.messages = await client.get_messages(state.selected_chat_id)
                except ApiError as e:
                    ui.notify(e.message, type="negative")
            refresh_messages()

        async def create_chat(title: str | None = None) -> str | None:
            assert state.user is not None
            try:
                chat = await client.create_chat(state.user.id, title)
            except ApiError as e:
                ui.notify(e.message, type="negative")
                return None
            state.selected_chat_id = chat.id
            state.messages = []
            ui.notify("New chat created!", type="positive")
            await load_chats()
            refresh_messages()
            return chat.id

        async def select_chat(chat_id: str) -> None:
            if state.is_sending:
                return
            state.selected_chat_id = chat_id
            state.pending = None
            refresh_chat_list()
            await load_messages()

        def refresh_chat_list() -> None:
            chat_list_container.clear()
            with chat_list_container:
                if not state.chats:
                    ui.label("No chats yet. Create your first chat!").classes(
                        "text-xs text-gray-500 p-2"
                    )
                for chat in state.chats:
                    selected = " selected" if chat.id == state.selected_chat_id else ""
                    item = ui.label(chat.title or "New Chat").classes(
                        f"chat-item{selected} w-full text-sm text-white p-2 truncate"
                    )
                    item.on("click", lambda _, cid=chat.id: select_chat(cid))

        def refresh_attachment() -> None:
            attachment_row.set_visibility(state.resume_text is not None)

        def displayed_status(message: MessageOut) -> MessageStatus | None:
            if message.role != "user":
                return None
            if message.id in state.live_status:
                return state.live_status[message.id]
            return MessageStatus(message.status) if message.status else None

        def refresh_messages() -> None:
            messages_container.clear()
            with messages_container:
                if state.selected_chat_id is None:
                    render_welcome()
                    return
                if not state.messages and state.pending is None:
                    with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                        ui.icon("forum").classes("text-5xl text-gray-300")
                        ui.label("Ask about your career").classes("text-lg text-gray-400")
                for msg in state.messages:
                    render_bubble(msg.role, msg.content, msg.created_at, displayed_status(msg))
                if state.pending is not None:
                    pending = state.pending
                    render_bubble(
                        "user", pending.content, pending.created_at, pending.status, pending.has_resume
                    )
                if state.is_sending:
                    render_typing_indicator()

        def render_welcome() -> None:
            with ui.column().classes("w-full items-center justify-center gap-4 py-12"):
                ui.label("Welcome to Career Bot").classes("text-3xl font-bold")
                ui.label("Your AI Career Advisor").classes("text-xl text-gray-600")
                ui.label(
                    "Get personalized career guidance, resume tips, interview prep, and "
                    "professional development advice. Choose a topic below or ask your "
                    "own career question."
                ).classes("text-sm text-gray-500 text-center max-w-xl")
                with ui.grid(columns=2).classes("w-full max-w-2xl gap-3"):
                    for icon, label, prompt in STARTER_PROMPTS:
                        with ui.card().classes("cursor-pointer p-4").on(
                            "click", lambda _, p=prompt: send(p)
                        ), ui.row().classes("items-center gap-3"):
                            ui.icon(icon).classes("text-gray-600")
                            ui.label(label).classes("text-sm")

        async def handle_upload(e: events.UploadEventArguments) -> None:
            upload.reset()
            if e.file.content_type != PDF_CONTENT_TYPE:
                ui.notify("Please upload a PDF file only.", type="warning")
                return
            send_btn.disable()
            try:
                parsed = await client.parse_pdf(e.file.name, await e.file.read(), e.file.content_type)
            except ApiError as err:
                logger.warning(f"PDF upload failed: {err.message}")
                ui.notify("Failed to parse PDF. Please try again.", type="negative")
                return
            finally:
                if not state.is_sending:
                    send_btn.enable()
            state.resume_text, state.resume_name = parsed.text, parsed.file_name
            state.resume_highlights = resume_highlights(parsed.text)
            refresh_attachment()
            ui.notify(
                f'PDF "{parsed.file_name}" uploaded successfully! Now type your message.',
                type="positive",
            )

        def discard_attachment() -> None:
            state.resume_text = state.resume_name = None
            state.resume_highlights = ""
            refresh_attachment()

        async def send(text: str | None = None) -> None:
            typed = (text if text is not None else input_field.value or "").strip()
            if not typed or state.is_sending or state.user is None:
                return

            if state.selected_chat_id is None and await create_chat(title_from_prompt(typed)) is None:
                return
            chat_id = state.selected_chat_id
            assert chat_id is not None

            input_field.value = ""
            outgoing = with_resume_context(typed, state.resume_text)
            has_resume = outgoing != typed
            discard_attachment()

            state.is_sending = True
            send_btn.disable()
            state.pending = PendingMessage(
                content=typed, created_at=datetime.now(UTC), has_resume=has_resume
            )

            def on_status(status: MessageStatus) -> None:
                if tracker.message_id is None:
                    if state.pending is not None:
                        state.pending.status = status
                else:
                    state.live_status[tracker.message_id] = status
                refresh_messages()

            tracker = MessageStatusTracker(
                on_change=on_status,
                persist=lambda message_id, status: client.update_message_status(
                    message_id, status.value
                ),
            )
            tracker.start()
            refresh_messages()

            try:
                result = await client.send_message(chat_id, outgoing, state.user.id)
            except ApiError as e:
                tracker.fail()
                state.is_sending = False
                send_btn.enable()
                refresh_messages()
                ui.notify(f"Failed to send message: {e.message}", type="negative")
                return

            state.pending = None
            state.is_sending = False
            send_btn.enable()
            server_status = MessageStatus(result.user_message.status or MessageStatus.SENT.value)
            tracker.confirm(result.user_message.id, server_status)
            state.live_status[result.user_message.id] = tracker.status
            ui.notify("Message sent!", type="positive")
            await load_messages()
            await load_chats()

        # === Layout ===

        assert state.user is not None
        with ui.left_drawer(value=True).classes("bg-black p-0").props("width=300") as drawer:
            with ui.column().classes("w-full h-full p-4 gap-4"):
                with ui.row().classes("items-center gap-3"):
                    with ui.element("div").classes(
                        "w-8 h-8 rounded-full flex items-center justify-center avatar-assistant"
                    ):
                        ui.icon("smart_toy").classes("text-black")
                    ui.label("Career Bot").classes("text-lg font-semibold text-white")
                ui.button("New Chat", icon="add", on_click=lambda: create_chat()).classes(
                    "w-full accent"
                )
                ui.label("Recent").classes("text-xs text-gray-400")
                with ui.scroll_area().classes("flex-grow w-full"):
                    chat_list_container = ui.column().classes("w-full gap-1")
                with ui.row().classes("w-full items-center gap-3 border-t border-gray-800 pt-4"):
                    with ui.element("div").classes(
                        "w-8 h-8 rounded-full bg-gray-600 flex items-center justify-center"
                    ):
                        ui.icon("person").classes("text-white")
                    with ui.column().classes("flex-grow gap-0 min-w-0"):
                        ui.label(state.user.name or "User").classes("text-sm text-white truncate")
                        ui.label("Pro Plan" if state.user.is_subscribed else "Free Plan").classes(
                            "text-xs text-gray-400"
                        )
                    ui.button("Logout", on_click=lambda: sign_out()).props("flat dense").classes(
                        "text-xs text-gray-400"
                    )

        with root, ui.column().classes("w-full gap-0").style("height: 100vh"):
            with ui.row().classes("w-full header px-4 py-3 items-center justify-between"):
                ui.button(icon="menu", on_click=drawer.toggle).props("flat round").classes("accent")
                ui.button(icon="dark_mode", on_click=dark.toggle).props("flat round").classes(
                    "accent"
                )

            with ui.scroll_area().classes("flex-grow w-full"), ui.column().classes(
                "w-full max-w-3xl mx-auto p-5"
            ):
                messages_container = ui.column().classes("w-full gap-4")

            with ui.column().classes("w-full max-w-3xl mx-auto p-4 gap-2"):
                with ui.row().classes(
                    "w-full items-center gap-2 p-3 rounded-lg bg-blue-50 text-blue-800"
                ) as attachment_row:
                    ui.element("div").classes("w-2 h-2 bg-green-500 rounded-full")
                    ui.label().bind_text_from(
                        state,
                        "resume_name",
                        lambda name: f"PDF {name or ''} ready to send with your message",
                    ).classes("text-sm font-medium")
                    ui.label().bind_text_from(state, "resume_highlights").classes(
                        "text-xs text-blue-600 flex-grow truncate"
                    )
                    ui.button(icon="close", on_click=discard_attachment).props("flat round dense")
                with ui.row().classes("w-full input-box px-3 py-2 items-end gap-2 no-wrap"):
                    upload = (
                        ui.upload(on_upload=handle_upload, auto_upload=True, max_files=1)
                        .props("accept=.pdf flat dense hide-upload-btn")
                        .classes("w-12")
                    )
                    input_field = (
                        ui.textarea(placeholder="Ask about your career...")
                        .props("autogrow borderless dense rows=1")
                        .classes("flex-grow")
                        .on("keydown.enter.prevent", lambda: send())
                    )
                    send_btn = (
                        ui.button(icon="send", on_click=lambda: send())
                        .props("round unelevated")
                        .classes("accent")
                    )

        refresh_attachment()
        refresh_messages()
        ui.timer(0.1, load_chats, once=True)

    # === Restore cached session ===

    cached = store.restore()
    if cached is not None and config.validate_session_on_load:
        try:
            cached.user = await client.get_current_user(cached.token)
        except ApiError as e:
            logger.info(f"Dropping cached session: {e.message}")
            store.clear()
            cached = None

    if cached is None:
        show_auth()
    else:
        state.user = cached.user
        show_workspace()


def main() -> None:
    ui.run(
        title="Career Bot",
        port=8080,
        reload=False,
        storage_secret=get_ui_config().storage_secret,
    )


if __name__ == "__main__":
    main()
