import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from . import __version__
from .badge import StatusBadge
from .cleanup import RetentionScheduler, sweep_stale_jobs
from .env import Settings, get_settings, load_env, open_stores
from .extractor import extract_job_data
from .jobs import JobStore
from .logger import get_logger
from .router import CLEAR_DATA, GET_TRENDS, JOB_SCRAPED, SYNC_TO_SKILLOS, MessageRouter
from .sync import SyncDispatcher, get_api_url, set_api_url
from .trends import format_trends


def build_router(settings: Settings, badge: Optional[StatusBadge] = None) -> MessageRouter:
    local_store, sync_store = open_stores(settings)
    job_store = JobStore(local_store, badge)
    dispatcher = SyncDispatcher(job_store, sync_store, timeout=settings.sync_timeout)
    return MessageRouter(job_store, dispatcher)


def scrape_and_send(url: str, router: MessageRouter) -> Optional[Dict[str, Any]]:
    """Fetch a posting, extract skills and send it as JOB_SCRAPED.

    Returns the record, or None when the page mentions no known skills.
    Raises ValueError when the page can't be fetched.
    """
    from .scrapers.common import fetch_page

    html = fetch_page(url)
    record = extract_job_data(html, url)
    if not record["skills"]:
        return None
    router.dispatch({"type": JOB_SCRAPED, "data": record})
    return record


def cmd_scrape(args: argparse.Namespace, router: MessageRouter) -> None:
    url = args.url
    try:
        record = scrape_and_send(url, router)
    except ValueError as e:
        raise SystemExit(str(e))
    if record is None:
        print(f"No known skills found on {url}")
        return
    print(f"Skills: {', '.join(record['skills'])}")
    print(f"Stored jobs: {router.job_store.count()}")


def cmd_scrape_file(args: argparse.Namespace, router: MessageRouter) -> None:
    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    count = sent = empty = failed = 0
    with input_path.open("r", encoding="utf-8") as f:
        for line in f:
            url = line.strip()
            if not url or url.startswith("#"):
                continue
            count += 1
            try:
                record = scrape_and_send(url, router)
            except ValueError as e:
                print(f"[error] {url} -> {e}")
                failed += 1
                continue
            if record is None:
                print(f"[no-skills] {url}")
                empty += 1
            else:
                print(f"[sent] {url} ({len(record['skills'])} skills)")
                sent += 1
    print(f"Done. total={count} sent={sent} no-skills={empty} failed={failed}")


def cmd_ingest(args: argparse.Namespace, router: MessageRouter) -> None:
    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        try:
            record = json.load(f)
        except json.JSONDecodeError as e:
            raise SystemExit(f"Invalid JSON in {input_path}: {e}")

    outcome = router.job_store.add_job(record)
    if outcome["status"] == "validation_error":
        print("Invalid:")
        for e in outcome["errors"]:
            print(f" - {e}")
        raise SystemExit(2)
    print(f"Status: {outcome['status']}")
    print(f"Stored jobs: {outcome['count']}")


def cmd_trends(args: argparse.Namespace, router: MessageRouter) -> None:
    trends = router.request({"type": GET_TRENDS})
    if args.json:
        print(json.dumps(trends, indent=2))
        return
    print(format_trends(trends, limit=args.limit))


def cmd_status(args: argparse.Namespace, router: MessageRouter) -> None:
    count = router.job_store.count()
    router.job_store.badge.reflect_count(count)
    print(f"Stored jobs: {count}")
    print(f"Badge: {router.job_store.badge.text!r}")
    api_url = get_api_url(router.dispatcher.config_store)
    print(f"API URL: {api_url or '(not set)'}")


def cmd_clear(args: argparse.Namespace, router: MessageRouter) -> None:
    router.dispatch({"type": CLEAR_DATA})
    print("Cleared all job records.")


def cmd_sweep(args: argparse.Namespace, router: MessageRouter) -> None:
    before, after = sweep_stale_jobs(router.job_store, days=args.days)
    print(f"Removed {before - after} stale jobs, {after} remaining.")


def cmd_sync(args: argparse.Namespace, router: MessageRouter) -> None:
    result = router.request({"type": SYNC_TO_SKILLOS})
    if result["success"]:
        print("Synced.")
        return
    raise SystemExit(f"Sync failed: {result['error']}")


def cmd_config(args: argparse.Namespace, router: MessageRouter) -> None:
    config_store = router.dispatcher.config_store
    if args.config_command == "set-api-url":
        set_api_url(config_store, args.url)
        print(f"API URL set to {args.url}")
    elif args.config_command == "unset-api-url":
        set_api_url(config_store, None)
        print("API URL removed")
    else:
        print(f"API URL: {get_api_url(config_store) or '(not set)'}")


def serve(router: MessageRouter, settings: Settings, stdin=None, stdout=None) -> None:
    """Read one JSON message per line and write replies as JSON lines.

    The retention sweeper runs in the background until input ends.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    logger = router.logger
    scheduler = RetentionScheduler(router.job_store, interval_minutes=settings.sweep_interval_minutes)
    scheduler.start()
    try:
        for line in stdin:
            line = line.strip()
            if not line:
                continue
            try:
                message = json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning("Skipping malformed message", error=str(e))
                continue
            future = router.dispatch(message)
            if future is None:
                continue
            try:
                result = future.result()
            except Exception as e:
                logger.record_error(type(e).__name__)
                logger.error("Reply handler failed", type=message.get("type"), error=str(e))
                result = {"error": str(e)}
            reply = {"type": message.get("type"), "reply": result}
            if "id" in message:
                reply["id"] = message["id"]
            stdout.write(json.dumps(reply) + "\n")
            stdout.flush()
    finally:
        scheduler.stop()
        logger.log_metrics_summary()


def cmd_serve(args: argparse.Namespace, router: MessageRouter, settings: Settings) -> None:
    serve(router, settings)


def main(argv=None):
    load_env()
    parser = argparse.ArgumentParser(prog="skilltrends", description="Skill demand trends from scraped job postings")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    scr = subparsers.add_parser("scrape", help="Scrape a job posting URL and store its skills")
    scr.add_argument("--url", required=True, help="Job posting URL")
    scr.set_defaults(func=cmd_scrape)

    scrf = subparsers.add_parser("scrape-file", help="Scrape job posting URLs from a file")
    scrf.add_argument("--input", required=True, help="Text file with one URL per line")
    scrf.set_defaults(func=cmd_scrape_file)

    ing = subparsers.add_parser("ingest", help="Store a job record from a JSON file")
    ing.add_argument("--input", required=True, help="Path to job record JSON")
    ing.set_defaults(func=cmd_ingest)

    trd = subparsers.add_parser("trends", help="Show skill demand trends")
    trd.add_argument("--limit", type=int, default=0, help="Show only the top N skills")
    trd.add_argument("--json", action="store_true", help="Print raw JSON")
    trd.set_defaults(func=cmd_trends)

    sts = subparsers.add_parser("status", help="Show stored job count and badge")
    sts.set_defaults(func=cmd_status)

    clr = subparsers.add_parser("clear", help="Delete all stored job records")
    clr.set_defaults(func=cmd_clear)

    swp = subparsers.add_parser("sweep", help="Remove stale job records now")
    swp.add_argument("--days", type=int, default=7, help="Keep records newer than N days (default 7)")
    swp.set_defaults(func=cmd_sweep)

    syn = subparsers.add_parser("sync", help="Push trends to the configured SkillOS API")
    syn.set_defaults(func=cmd_sync)

    cfg = subparsers.add_parser("config", help="Show or change the SkillOS API URL")
    cfg_sub = cfg.add_subparsers(dest="config_command")
    cfg_set = cfg_sub.add_parser("set-api-url", help="Set the sync endpoint")
    cfg_set.add_argument("url", help="Endpoint URL")
    cfg_sub.add_parser("unset-api-url", help="Remove the sync endpoint")
    cfg_sub.add_parser("show", help="Show the sync endpoint")
    cfg.set_defaults(func=cmd_config)

    srv = subparsers.add_parser("serve", help="Handle JSON messages from stdin and run the weekly sweep")
    srv.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if not hasattr(args, "func"):
        parser.print_help()
        return

    try:
        settings = get_settings()
    except ValueError as e:
        raise SystemExit(str(e))
    get_logger(level=settings.log_level, log_dir=settings.log_dir)
    router = build_router(settings)
    try:
        if args.func is cmd_serve:
            cmd_serve(args, router, settings)
        else:
            args.func(args, router)
    finally:
        router.close()


if __name__ == "__main__":
    main()
