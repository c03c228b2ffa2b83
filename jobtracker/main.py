"""Command-line entry point for the job tracker.

Usage:
    python -m jobtracker.main parse "高级Java工程师 北京 20k-30k ..."
    python -m jobtracker.main parse --file jd.txt --image shot.png
    python -m jobtracker.main add --file jd.txt --folder folder-1
    python -m jobtracker.main folders [--add NAME] [--delete ID]
    python -m jobtracker.main jobs [--folder ID]
    python -m jobtracker.main schedule [--event interview] [--urgency week]
    python -m jobtracker.main chat
    python -m jobtracker.main account register --nickname NAME --email EMAIL
"""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from jobtracker.accounts import AccountBook
from jobtracker.assistant import Assistant
from jobtracker.config import AppConfig, load_config
from jobtracker.models import FolderColor, JobRecord
from jobtracker.notifications import NotificationQueue
from jobtracker.schedule import EventTypeFilter, UrgencyFilter, days_until
from jobtracker.seed import seed_snapshot
from jobtracker.services import ChatResponder, JobExtractor, ModelClient
from jobtracker.storage import attach_persistence
from jobtracker.store import AppStore

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@dataclass
class App:
    config: AppConfig
    store: AppStore
    assistant: Assistant
    accounts: AccountBook


def build_app(config: AppConfig, data_dir: str | Path | None = None) -> App:
    """Wire the model client, services and a persisted store together."""
    client = ModelClient(config.model)
    data_dir = data_dir or config.data_dir
    store = AppStore(notifications=NotificationQueue(config.notification_duration))
    attach_persistence(
        store,
        data_dir,
        seed=seed_snapshot if config.seed_on_first_run else None,
    )
    assistant = Assistant(store, JobExtractor(client), ChatResponder(client))
    return App(config=config, store=store, assistant=assistant, accounts=AccountBook(store, data_dir))


# ── Input & Output ─────────────────────────────────────────────────────────


def _read_input(args: argparse.Namespace) -> tuple[str, Optional[bytes]]:
    text = " ".join(args.text or [])
    if args.file:
        text = Path(args.file).read_text(encoding="utf-8")
    image = Path(args.image).read_bytes() if args.image else None
    return text, image


def _format_job(job: JobRecord) -> str:
    line = f"[{job.id}] {job.company.name or '?'} · {job.position.title or '?'}"
    extras = [v for v in (job.position.salary, job.position.location, job.position.status.value) if v]
    if extras:
        line += "  (" + ", ".join(extras) + ")"
    if job.is_archived:
        line += "  [archived]"
    return line


def _print_notifications(store: AppStore) -> None:
    for notification in store.notifications.items:
        print(f"<{notification.severity.value}> {notification.message}")
    store.notifications.clear()


# ── Commands ───────────────────────────────────────────────────────────────


def cmd_parse(args: argparse.Namespace, config: AppConfig) -> int:
    text, image = _read_input(args)
    if not text.strip() and not image:
        logger.error("Nothing to parse: pass text, --file or --image")
        return 1
    extractor = JobExtractor(ModelClient(config.model))
    job = extractor.extract(text, image)
    print(json.dumps(job.to_dict(), indent=2, ensure_ascii=False))
    return 0


def cmd_add(args: argparse.Namespace, config: AppConfig) -> int:
    text, image = _read_input(args)
    if not text.strip() and not image:
        logger.error("Nothing to add: pass text, --file or --image")
        return 1
    app = build_app(config, args.data_dir)
    folder_id = args.folder or (app.store.folders[0].id if app.store.folders else None)
    if folder_id is None or app.store.get_folder(folder_id) is None:
        logger.error("No folder found matching '%s'", args.folder)
        return 1

    job = app.assistant.extractor.extract(text, image)
    record = app.assistant.confirm_add(folder_id, job)
    _print_notifications(app.store)
    if record is None:
        return 1
    print(_format_job(record))
    return 0


def cmd_folders(args: argparse.Namespace, config: AppConfig) -> int:
    app = build_app(config, args.data_dir)
    store = app.store
    if args.add:
        store.add_folder(args.add, args.color)
    if args.delete and not store.delete_folder(args.delete):
        logger.error("Could not delete folder '%s'", args.delete)
        return 1
    for folder in store.folders:
        print(f"[{folder.id}] {folder.name} ({folder.color.value}): {folder.job_count} jobs")
    return 0


def cmd_jobs(args: argparse.Namespace, config: AppConfig) -> int:
    app = build_app(config, args.data_dir)
    jobs = app.store.jobs
    if args.folder:
        jobs = [j for j in jobs if j.folder_id == args.folder]
    for job in jobs:
        print(_format_job(job))
    if not jobs:
        print("No jobs.")
    return 0


def cmd_schedule(args: argparse.Namespace, config: AppConfig) -> int:
    app = build_app(config, args.data_dir)
    app.store.set_schedule_filters(args.event, args.urgency)
    jobs = app.store.schedule_jobs()
    for job in jobs:
        days = days_until(job.position.deadline)
        event = job.reminder_event.value if job.reminder_event else "-"
        when = f"{days}d" if days is not None else "?"
        print(f"{when:>5}  {event:<13} {_format_job(job)}")
    if not jobs:
        print("Nothing scheduled.")
    return 0


def cmd_chat(args: argparse.Namespace, config: AppConfig) -> int:
    app = build_app(config, args.data_dir)
    store, assistant = app.store, app.assistant
    print("Type a message. /add [folder-id] files the last parsed job, /new starts over, /quit exits.")

    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if line in ("/quit", "/exit"):
            break
        if line == "/new":
            store.new_session()
            continue
        if line.startswith("/add"):
            parts = line.split(maxsplit=1)
            folder_id = parts[1] if len(parts) > 1 else (store.folders[0].id if store.folders else None)
            if folder_id is None:
                print("No folders yet: create one with `folders --add NAME`.")
                continue
            assistant.confirm_add(folder_id)
            _print_notifications(store)
            continue

        reply = assistant.send(line)
        if reply is not None:
            print(reply.content)
            if reply.parsed_job is not None:
                print(_format_job(reply.parsed_job))
        _print_notifications(store)
    return 0


def _secret(value: Optional[str], prompt: str) -> str:
    return value if value is not None else getpass.getpass(prompt)


def cmd_account(args: argparse.Namespace, config: AppConfig) -> int:
    app = build_app(config, args.data_dir)
    book = app.accounts
    action = args.account_command

    if action == "register":
        password = _secret(args.password, "Password: ")
        confirm = _secret(args.confirm, "Confirm password: ")
        ok = book.register(args.nickname, args.email, password, confirm) is not None
    elif action == "login":
        ok = book.login(args.email, _secret(args.password, "Password: ")) is not None
    elif action == "logout":
        book.logout()
        ok = True
    elif action == "passwd":
        old = _secret(args.old, "Current password: ")
        new = _secret(args.new, "New password: ")
        ok = book.change_password(old, new, _secret(args.confirm, "Confirm new password: "))
    else:
        ok = book.update_profile(nickname=args.nickname, avatar=args.avatar)

    _print_notifications(app.store)
    user = app.store.user
    print(f"Signed in as {user.nickname} <{user.email}>" if user else "Not signed in.")
    return 0 if ok else 1


COMMANDS = {
    "parse": cmd_parse,
    "add": cmd_add,
    "folders": cmd_folders,
    "jobs": cmd_jobs,
    "schedule": cmd_schedule,
    "chat": cmd_chat,
    "account": cmd_account,
}


def _add_input_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("text", nargs="*", help="Job posting text")
    parser.add_argument("--file", type=str, default=None, help="Read posting text (or HTML) from a file")
    parser.add_argument("--image", type=str, default=None, help="Screenshot of the posting")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Job tracker: parse job postings, file them into folders "
        "and keep an eye on application deadlines."
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Override data directory for state and accounts (default: from config)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug-level logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    _add_input_args(sub.add_parser("parse", help="Extract a structured job record"))

    add = sub.add_parser("add", help="Parse a posting and bookmark it")
    _add_input_args(add)
    add.add_argument("--folder", type=str, default=None, help="Target folder id (default: first folder)")

    folders = sub.add_parser("folders", help="List, add or delete folders")
    folders.add_argument("--add", type=str, default=None, help="Name of a folder to create")
    folders.add_argument(
        "--color",
        choices=[c.value for c in FolderColor],
        default=FolderColor.BLUE.value,
    )
    folders.add_argument("--delete", type=str, default=None, help="Id of a folder to delete")

    jobs = sub.add_parser("jobs", help="List bookmarked jobs")
    jobs.add_argument("--folder", type=str, default=None)

    schedule = sub.add_parser("schedule", help="Show upcoming deadlines")
    schedule.add_argument("--event", choices=[e.value for e in EventTypeFilter], default="all")
    schedule.add_argument("--urgency", choices=[u.value for u in UrgencyFilter], default="all")

    sub.add_parser("chat", help="Interactive assistant session")

    account = sub.add_parser("account", help="Manage the local user profile")
    account_sub = account.add_subparsers(dest="account_command", required=True)
    register = account_sub.add_parser("register", help="Create a profile and sign in")
    register.add_argument("--nickname", required=True)
    register.add_argument("--email", required=True)
    register.add_argument("--password", default=None, help="Prompted for when omitted")
    register.add_argument("--confirm", default=None, help="Prompted for when omitted")
    login = account_sub.add_parser("login", help="Sign in")
    login.add_argument("--email", required=True)
    login.add_argument("--password", default=None, help="Prompted for when omitted")
    account_sub.add_parser("logout", help="Sign out")
    passwd = account_sub.add_parser("passwd", help="Change the password of the signed-in user")
    passwd.add_argument("--old", default=None)
    passwd.add_argument("--new", default=None)
    passwd.add_argument("--confirm", default=None)
    profile = account_sub.add_parser("profile", help="Edit nickname or avatar")
    profile.add_argument("--nickname", default=None)
    profile.add_argument("--avatar", default=None)
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)

    config = load_config(args.config)
    setup_logging("DEBUG" if args.verbose else config.log_level)
    logger.debug("Model calls %s", "enabled" if config.model.enabled else "disabled")

    sys.exit(COMMANDS[args.command](args, config))


if __name__ == "__main__":
    main()
