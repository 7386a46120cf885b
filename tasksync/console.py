"""Text front-end for the sync engine.

Renders state snapshots to stdout and maps typed commands onto SyncEngine
intent methods. It holds no state of its own.
"""

import getpass
import logging
import shlex
from typing import Dict, List, Optional

from tasksync.api.client import ApiClient
from tasksync.config import get_settings
from tasksync.engine.sync import SyncEngine
from tasksync.logging_setup import setup_logging
from tasksync.models.state import AppState, SessionStatus
from tasksync.models.task import same_id

logger = logging.getLogger(__name__)

HELP = """Commands:
  list                         show tasks
  show                         show the selected task and its subtasks
  select <id> | unselect
  search <text> | sort <priority|due_date|eta|none> | priority <level> | due <days|none>
  new <title> [priority=.. eta=.. due=YYYY-MM-DD description=..]
  edit field=value ...         edit the selected task
  done <id>                    toggle completion
  delete [id]
  sub add <title> | sub done <id> | sub rename <id> <title> | sub rm <id>
  refresh | logout | help | quit"""


def _confirm(prompt: str) -> bool:
    return input(f"{prompt} [y/N] ").strip().lower() in {"y", "yes"}


def format_task(task, selected: bool = False) -> str:
    mark = "x" if task.completed else " "
    cursor = ">" if selected else " "
    extras = [task.priority]
    if task.due_date:
        extras.append(f"due {task.due_date.isoformat()}")
    if task.eta is not None:
        extras.append(f"{task.eta:g}h")
    return f"{cursor} [{mark}] {task.id}: {task.title} ({', '.join(extras)})"


class ConsoleView:
    """Subscriber that prints notifications as they appear."""

    def __init__(self):
        self._seen: Dict[str, Optional[int]] = {"flash": None, "error": None}

    def __call__(self, state: AppState) -> None:
        for kind in ("flash", "error"):
            notification = getattr(state, kind)
            if notification is not None and notification.id != self._seen[kind]:
                self._seen[kind] = notification.id
                prefix = "!" if kind == "error" else "*"
                print(f"{prefix} {notification.message}")


def render_tasks(state: AppState) -> None:
    if not state.tasks:
        print("(no tasks)")
        return
    for task in state.tasks:
        print(format_task(task, selected=same_id(task.id, state.selected_task_id)))


def render_detail(state: AppState) -> None:
    task = state.selected_task
    if task is None:
        print("(nothing selected)")
        return
    print(format_task(task, selected=True))
    if task.description:
        print(f"    {task.description}")
    if not state.subtasks:
        print("    No subtasks")
    for subtask in state.subtasks:
        mark = "x" if subtask.completed else " "
        print(f"    [{mark}] {subtask.id}: {subtask.title}")


def _split_fields(args: List[str]) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    words: List[str] = []
    for arg in args:
        if "=" in arg:
            key, value = arg.split("=", 1)
            fields["due_date" if key == "due" else key] = value
        else:
            words.append(arg)
    if words:
        fields["title"] = " ".join(words)
    return fields


def handle_command(engine: SyncEngine, line: str) -> bool:
    """Run one command line. Returns False when the user asked to quit."""
    try:
        parts = shlex.split(line)
    except ValueError as e:
        print(f"! {e}")
        return True
    if not parts:
        return True
    cmd, args = parts[0].lower(), parts[1:]
    if cmd in {"quit", "exit"}:
        return False
    try:
        return _dispatch(engine, cmd, args)
    except ValueError as e:
        # Bad filter values (unknown sort key or priority)
        print(f"! {e}")
        return True


def _dispatch(engine: SyncEngine, cmd: str, args: List[str]) -> bool:
    rest = " ".join(args)
    if cmd == "help":
        print(HELP)
    elif cmd in {"list", "ls"}:
        render_tasks(engine.state)
    elif cmd == "show":
        render_detail(engine.state)
    elif cmd == "select" and args:
        engine.select_task(_as_id(args[0]))
        render_detail(engine.state)
    elif cmd == "unselect":
        engine.clear_selection()
    elif cmd == "search":
        engine.set_filters(search=rest)
        render_tasks(engine.state)
    elif cmd == "sort":
        engine.set_filters(sort="" if rest in {"", "none"} else rest)
        render_tasks(engine.state)
    elif cmd == "priority" and args:
        engine.toggle_priority(args[0])
        render_tasks(engine.state)
    elif cmd == "due":
        engine.set_filters(due_within_days="" if rest in {"", "none"} else rest)
        render_tasks(engine.state)
    elif cmd == "new":
        engine.start_create_task()
        if engine.save_task(_split_fields(args)):
            render_tasks(engine.state)
        else:
            engine.cancel_form()
    elif cmd == "edit":
        if not engine.start_edit_task():
            print("! Select a task first")
            return True
        form = {**engine.form_initial_values(), **_split_fields(args)}
        if not engine.save_task(form):
            engine.cancel_form()
    elif cmd == "done" and args:
        engine.toggle_task_complete(_as_id(args[0]))
    elif cmd == "delete":
        engine.delete_task(_as_id(args[0]) if args else None)
    elif cmd == "sub" and args:
        _handle_subtask_command(engine, args[0].lower(), args[1:])
        render_detail(engine.state)
    elif cmd == "refresh":
        engine.refresh()
        render_tasks(engine.state)
    elif cmd == "logout":
        engine.logout()
        return False
    else:
        print("Unknown command; type 'help'")
    return True


def _handle_subtask_command(engine: SyncEngine, action: str, args: List[str]) -> None:
    if action == "add":
        engine.add_subtask(" ".join(args))
    elif action == "done" and args:
        engine.toggle_subtask_complete(_as_id(args[0]))
    elif action == "rename" and len(args) >= 2:
        engine.update_subtask(_as_id(args[0]), {"title": " ".join(args[1:])})
    elif action == "rm" and args:
        engine.delete_subtask(_as_id(args[0]))
    else:
        print("Unknown subtask command; type 'help'")


def _as_id(raw: str):
    return int(raw) if raw.isdigit() else raw


def _ensure_login(engine: SyncEngine) -> bool:
    while engine.state.session_status != SessionStatus.AUTHENTICATED:
        try:
            username = input("Username: ").strip()
            password = getpass.getpass("Password: ")
        except (EOFError, KeyboardInterrupt):
            print()
            return False
        if not engine.login(username, password):
            print(f"! {engine.state.auth_error}")
    return True


def main() -> None:
    settings = get_settings()
    setup_logging(console_level=settings.log_level, log_file=settings.log_file)

    api = ApiClient(settings.base_url, timeout=settings.request_timeout_sec)
    engine = SyncEngine(api, confirm=_confirm)
    engine.subscribe(ConsoleView())
    logger.info(f"Connecting to {settings.base_url}")

    try:
        engine.start()
        if not _ensure_login(engine):
            return
        print(f"Hi, {engine.state.user.display_name}")
        render_tasks(engine.state)
        while True:
            try:
                line = input("tasks> ")
            except (EOFError, KeyboardInterrupt):
                print()
                break
            if not handle_command(engine, line):
                break
    finally:
        engine.close()


if __name__ == "__main__":
    main()
