"""NiceGUI chat interface with a session sidebar and attachment upload."""

import html
import logging

from nicegui import app, events, ui

from pdfchat.models.schemas import Attachment, ChatMessage, Role
from pdfchat.parsing.attachments import (
    AttachmentError,
    attachment_from_upload,
    displayable_attachments,
)
from pdfchat.store.session_store import SessionStore
from pdfchat.ui.controller import ChatController, format_session_date

logger = logging.getLogger(__name__)

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: linear-gradient(135deg, #f8fafc 0%, #eff6ff 50%, #e0e7ff 100%); }

    .header { background: linear-gradient(90deg, #2563eb 0%, #4f46e5 100%); }

    .message-user {
        background: linear-gradient(135deg, #3b82f6 0%, #4f46e5 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: white;
        color: #1e293b;
        border: 1px solid #e2e8f0;
        border-radius: 18px 18px 18px 4px;
    }

    .avatar-user { background: linear-gradient(135deg, #3b82f6 0%, #4f46e5 100%); }
    .avatar-assistant { background: #e2e8f0; }

    .session-item { border: 1px solid transparent; cursor: pointer; }
    .session-item:hover { background: #f8fafc; }
    .session-active { background: #eff6ff; border-color: #bfdbfe; }

    .send-btn { background: linear-gradient(90deg, #3b82f6 0%, #4f46e5 100%) !important; }
</style>
"""


def render_attachment(attachment: Attachment, index: int) -> None:
    """Images inline, PDFs in an embedded viewer."""
    label = attachment.name or f"attachment-{index}"
    if attachment.is_image:
        ui.image(attachment.url).props(f'alt="{html.escape(label)}"').classes(
            "w-72 rounded-lg border shadow-sm"
        )
    elif attachment.is_pdf:
        with ui.column().classes("w-full p-4 bg-slate-50 rounded-lg border gap-2"):
            with ui.row().classes("items-center gap-2"):
                ui.icon("picture_as_pdf").classes("text-red-600 text-xl")
                ui.label(attachment.name or f"PDF Document {index + 1}").classes(
                    "font-medium text-slate-700"
                )
            ui.html(
                f'<iframe src="{html.escape(attachment.url)}" width="100%" height="400" '
                f'title="{html.escape(label)}" class="rounded border"></iframe>',
                sanitize=False,
            ).classes("w-full")


@ui.page("/")
async def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)

    sessions_container: ui.column
    messages_container: ui.column
    files_label: ui.label
    input_field: ui.input
    send_btn: ui.button
    upload: ui.upload

    def refresh() -> None:
        refresh_sessions()
        refresh_messages()
        refresh_files()

    reply_labels: dict[str, ui.label] = {}
    browser_tz: str | None = None

    def update_reply(reply: ChatMessage) -> None:
        label = reply_labels.get(reply.id)
        if label is None:
            refresh_messages()
        else:
            label.set_text(reply.content)

    controller = ChatController(
        SessionStore(app.storage.user), on_change=refresh, on_reply=update_reply
    )

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-assistant"
        icon = "person" if is_user else "smart_toy"
        color = "text-white" if is_user else "text-slate-700"
        with ui.element("div").classes(
            f"w-10 h-10 rounded-xl flex items-center justify-center shrink-0 {css}"
        ):
            ui.icon(icon).classes(f"{color} text-lg")

    def render_message(msg: ChatMessage) -> None:
        is_user = msg.role == Role.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align} gap-4 items-start no-wrap"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes(f"max-w-[75%] px-4 py-3 gap-3 shadow {bubble}"):
                label = ui.label(msg.content).classes("whitespace-pre-wrap leading-relaxed")
                if not is_user:
                    reply_labels[msg.id] = label
                for index, attachment in enumerate(displayable_attachments(msg)):
                    render_attachment(attachment, index)
            if is_user:
                render_avatar(True)

    def refresh_messages() -> None:
        messages_container.clear()
        reply_labels.clear()
        with messages_container:
            if not controller.messages:
                with ui.column().classes("w-full py-16 items-center gap-3"):
                    ui.icon("auto_awesome").classes("text-6xl text-indigo-500")
                    ui.label("Welcome to Gemini PDF Chat").classes(
                        "text-2xl font-bold text-slate-800"
                    )
                    ui.label(
                        "Upload a PDF and start asking questions about its content, "
                        "or just chat normally with the assistant."
                    ).classes("text-slate-600 text-center max-w-md")
            else:
                for msg in controller.messages:
                    render_message(msg)

    def refresh_sessions() -> None:
        sessions_container.clear()
        with sessions_container:
            sessions = controller.store.sessions
            if not sessions:
                ui.label("No chat history yet").classes(
                    "w-full p-4 text-center text-slate-500 text-sm"
                )
            for session in sessions:
                active = "session-active" if session.id == controller.current_session_id else ""
                with (
                    ui.row()
                    .classes(f"w-full p-3 rounded-lg items-start no-wrap session-item {active}")
                    .on("click", lambda _, sid=session.id: controller.load_session(sid))
                ):
                    ui.icon("chat_bubble_outline").classes("text-slate-500 mt-0.5")
                    with ui.column().classes("flex-grow min-w-0 gap-0"):
                        ui.label(session.title).classes(
                            "truncate text-sm font-medium text-slate-800"
                        )
                        ui.label(
                            format_session_date(session.created_at, browser_tz)
                        ).classes("text-xs text-slate-500")
                    ui.button(
                        icon="delete",
                        on_click=lambda _, sid=session.id: controller.delete_session(sid),
                    ).props("flat dense round size=sm color=red").on(
                        "click.stop", lambda: None
                    )

    def refresh_files() -> None:
        count = len(controller.pending_files)
        files_label.set_text(f"{count} file(s) selected" if count else "")
        files_label.set_visibility(count > 0)

    async def handle_upload(e: events.UploadEventArguments) -> None:
        data = await e.file.read()
        try:
            attachment = attachment_from_upload(e.file.name, data, e.file.content_type)
        except AttachmentError as err:
            logger.warning(f"Rejected upload: {err}")
            ui.notify(str(err), type="negative")
            return
        controller.attach(attachment)

    async def send_message() -> None:
        text = input_field.value or ""
        if controller.is_streaming or (not text.strip() and not controller.pending_files):
            return

        input_field.value = ""
        upload.reset()
        send_btn.disable()
        try:
            await controller.submit_turn(text)
        finally:
            send_btn.enable()

        if controller.last_error:
            ui.notify(controller.last_error, type="negative")

    def reset_chat() -> None:
        controller.reset()
        upload.reset()

    def new_chat() -> None:
        controller.create_session()
        upload.reset()

    # === UI Layout ===
    with ui.left_drawer(value=True).classes("bg-white/80 p-0 w-80") as drawer:
        with ui.row().classes("w-full header px-4 py-4 items-center gap-2"):
            ui.icon("auto_awesome").classes("text-white text-xl")
            with ui.column().classes("gap-0"):
                ui.label("Gemini Chat").classes("font-semibold text-sm text-white")
                ui.label("AI Assistant").classes("text-xs text-blue-100")
        with ui.row().classes("w-full px-4 pt-4 items-center justify-between"):
            ui.label("Chat History").classes("text-slate-600 font-medium text-sm")
            ui.button(icon="add", on_click=new_chat).props("flat dense round size=sm")
        with ui.scroll_area().classes("flex-grow w-full px-2"):
            sessions_container = ui.column().classes("w-full gap-2")
        ui.label("Powered by Google Gemini").classes(
            "w-full p-4 text-xs text-slate-500 text-center border-t"
        )

    with ui.header().classes("bg-white/80 text-slate-800 items-center justify-between px-4"):
        with ui.row().classes("items-center gap-3"):
            ui.button(icon="menu", on_click=drawer.toggle).props("flat dense round")
            with ui.column().classes("gap-0"):
                ui.label("Gemini PDF Chat").classes("text-xl font-bold text-indigo-600")
                ui.label("AI-powered document assistant").classes("text-sm text-slate-500")
        ui.button("Reset Chat", icon="delete", on_click=reset_chat).props("outline size=sm")

    with ui.column().classes("w-full max-w-4xl mx-auto p-6 gap-6"):
        messages_container = ui.column().classes("w-full gap-6")

    with ui.footer().classes("bg-white/80 border-t"):
        with ui.column().classes("w-full max-w-4xl mx-auto p-2 gap-3"):
            with ui.row().classes("items-center gap-3"):
                upload = (
                    ui.upload(
                        label="Upload Files",
                        multiple=True,
                        auto_upload=True,
                        on_upload=handle_upload,
                    )
                    .props('accept=".pdf,image/*" flat bordered dense')
                    .classes("max-w-xs")
                )
                files_label = ui.label().classes(
                    "px-3 py-1 bg-blue-50 text-blue-700 rounded-full text-sm"
                )
            with ui.row().classes("w-full gap-3 items-center no-wrap"):
                input_field = (
                    ui.input(placeholder="Ask about your PDF or chat normally...")
                    .props("outlined rounded")
                    .classes("flex-grow")
                    .on("keydown.enter", send_message)
                )
                send_btn = (
                    ui.button(icon="send", on_click=send_message)
                    .props("round unelevated color=primary")
                    .classes("send-btn")
                )

    refresh()

    try:
        await ui.context.client.connected()
        browser_tz = await ui.run_javascript(
            "Intl.DateTimeFormat().resolvedOptions().timeZone"
        )
    except TimeoutError:
        logger.debug("Browser did not report a timezone")
        return
    refresh_sessions()


def main() -> None:
    from pdfchat.main import storage_secret

    ui.run(title="Gemini PDF Chat", port=8080, reload=False, storage_secret=storage_secret())


if __name__ == "__main__":
    main()
