#!/usr/bin/env python3
"""
LINE Health Agent Setup Wizard

Walks through the Anthropic key, the LINE channel credentials and the reminder
recipient, writes them to .env, then creates the Modal secrets, deploys and
points the LINE channel webhook at the deployed app.

Usage:
    python scripts/setup.py
    python scripts/setup.py --skip-deploy   # only write .env
"""

import argparse
import os
import re
import subprocess
import sys
from getpass import getpass
from pathlib import Path
from typing import Optional, Tuple

import httpx
from dotenv import dotenv_values, set_key

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_FILE = PROJECT_ROOT / ".env"

LINE_API_BASE = "https://api.line.me/v2/bot"
ANTHROPIC_MODELS_URL = "https://api.anthropic.com/v1/models"

ENV_KEYS = (
    "ANTHROPIC_API_KEY",
    "LINE_CHANNEL_SECRET",
    "LINE_CHANNEL_ACCESS_TOKEN",
    "LINE_USER_ID",
    "SHEET_ID",
)

# Keys that go into the "line" Modal secret when set
LINE_SECRET_KEYS = ("LINE_CHANNEL_SECRET", "LINE_CHANNEL_ACCESS_TOKEN", "LINE_USER_ID", "SHEET_ID")

_USE_COLOR = sys.stdout.isatty() and "NO_COLOR" not in os.environ
_MARKS = {
    "ok": ("\033[92m", "[OK]"),
    "err": ("\033[91m", "[X]"),
    "info": ("\033[93m", "[i]"),
}


def _paint(code: str, text: str) -> str:
    return f"{code}{text}\033[0m" if _USE_COLOR else text


def say(kind: str, msg: str):
    color, mark = _MARKS[kind]
    print(f"{_paint(color, mark)} {msg}")


def note(msg: str):
    print(_paint("\033[2m", f"   {msg}"))


def stage(num: int, title: str):
    print("\n" + _paint("\033[94m\033[1m", f"[{num}] {title}"))
    print("-" * 50)


def ask(prompt: str, default: str = None, secret: bool = False) -> str:
    """Read a value; an empty answer keeps `default`."""
    if secret:
        answer = getpass(f"{prompt}{' [keep existing]' if default else ''}: ")
    else:
        answer = input(f"{prompt}{f' [{default}]' if default else ''}: ")
    return answer.strip() or (default or "")


def yes(prompt: str) -> bool:
    return input(f"{prompt} [Y/n]: ").strip().lower() in ("", "y", "yes")


# ============================================================================
# CREDENTIAL CHECKS
# ============================================================================

def _call(method: str, url: str, **kwargs) -> Tuple[Optional[httpx.Response], str]:
    """One HTTP call; returns (response, "") or (None, error message)."""
    try:
        return httpx.request(method, url, timeout=kwargs.pop("timeout", 15), **kwargs), ""
    except httpx.TimeoutException:
        return None, "Request timed out, check your internet connection"
    except httpx.HTTPError as e:
        return None, f"Network error: {e}"


def validate_anthropic_key(api_key: str) -> Tuple[bool, str]:
    response, error = _call(
        "GET", ANTHROPIC_MODELS_URL,
        headers={"x-api-key": api_key, "anthropic-version": "2023-06-01"},
    )
    if response is None:
        return False, error
    if response.status_code == 401:
        return False, "Anthropic rejected the key (see console.anthropic.com)"
    if response.is_success:
        return True, "Anthropic key accepted"
    return False, f"Anthropic answered HTTP {response.status_code}"


def validate_line_token(access_token: str) -> Tuple[bool, str, dict]:
    """Check the channel access token against the bot info endpoint."""
    response, error = _call(
        "GET", f"{LINE_API_BASE}/info",
        headers={"Authorization": f"Bearer {access_token}"},
    )
    if response is None:
        return False, error, {}
    if response.status_code == 401:
        return False, "LINE rejected the token; reissue it in the LINE Developers console", {}
    if response.is_success:
        return True, "Channel access token accepted", response.json()
    return False, f"LINE answered HTTP {response.status_code}", {}


def validate_user_id(access_token: str, user_id: str) -> Tuple[bool, str]:
    """Push a hello to the reminder recipient."""
    response, error = _call(
        "POST", f"{LINE_API_BASE}/message/push",
        headers={"Authorization": f"Bearer {access_token}"},
        json={"to": user_id, "messages": [{"type": "text", "text": "セットアップが完了しました✅"}]},
    )
    if response is None:
        return False, error
    if response.is_success:
        return True, "Test message pushed, check LINE"
    return False, f"Push failed: {response.text[:200]}"


# ============================================================================
# .env FILE
# ============================================================================

def load_existing_env(filepath: Path = ENV_FILE) -> dict:
    if not filepath.exists():
        return {}
    return {k: v for k, v in dotenv_values(filepath).items() if v}


def save_env_file(config: dict, filepath: Path = ENV_FILE):
    filepath.touch(exist_ok=True)
    for key in ENV_KEYS:
        if config.get(key):
            set_key(str(filepath), key, config[key])
    say("ok", f"Wrote {filepath}")


# ============================================================================
# MODAL
# ============================================================================

def _run(args: list, timeout: int) -> Optional[subprocess.CompletedProcess]:
    """Run a CLI command; None when it is missing or hangs."""
    try:
        return subprocess.run(args, capture_output=True, text=True, timeout=timeout, cwd=PROJECT_ROOT)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None


def check_modal_installed() -> Tuple[bool, bool]:
    """(installed, authenticated) for the modal CLI."""
    version = _run(["modal", "--version"], timeout=10)
    if version is None or version.returncode != 0:
        return False, False
    apps = _run(["modal", "app", "list"], timeout=15)
    return True, apps is not None and apps.returncode == 0


def create_modal_secrets(config: dict) -> bool:
    secrets = {
        "anthropic": {"ANTHROPIC_API_KEY": config["ANTHROPIC_API_KEY"]},
        "line": {k: config[k] for k in LINE_SECRET_KEYS if config.get(k)},
    }
    for name, values in secrets.items():
        args = ["modal", "secret", "create", name, "--force"] + [f"{k}={v}" for k, v in values.items()]
        result = _run(args, timeout=30)
        if result is None or result.returncode != 0:
            say("err", f"Could not create Modal secret '{name}'")
            if result is not None and result.stderr:
                note(result.stderr.strip())
            return False
        say("ok", f"Modal secret '{name}' ready")
    return True


def deploy_to_modal() -> Tuple[bool, Optional[str]]:
    """`modal deploy` the app; returns (success, app base URL if printed)."""
    say("info", "Deploying (this can take a minute)...")
    result = _run(["modal", "deploy", "modal_agent.py"], timeout=300)
    if result is None or result.returncode != 0:
        say("err", "modal deploy failed")
        if result is not None and result.stderr:
            note(result.stderr.strip())
        return False, None

    # e.g. "Created web function web => https://user--line-health-agent-web.modal.run"
    match = re.search(r"https://\S+?\.modal\.run", result.stdout)
    say("ok", "Deployed")
    return True, match.group(0) if match else None


def register_line_webhook(access_token: str, webhook_url: str) -> bool:
    """Point the channel at `webhook_url` and ask LINE for a test delivery."""
    headers = {"Authorization": f"Bearer {access_token}"}
    response, error = _call(
        "PUT", f"{LINE_API_BASE}/channel/webhook/endpoint",
        headers=headers, json={"endpoint": webhook_url},
    )
    if response is None or not response.is_success:
        say("err", f"Webhook registration failed: {error or response.text[:200]}")
        return False
    say("ok", f"Webhook set to {webhook_url}")

    response, error = _call(
        "POST", f"{LINE_API_BASE}/channel/webhook/test",
        headers=headers, json={"endpoint": webhook_url}, timeout=30,
    )
    result = response.json() if response is not None and response.is_success else {}
    if result.get("success"):
        say("ok", "LINE test delivery reached the app")
    else:
        say("info", f"LINE test delivery failed: {result.get('detail') or error or 'see app logs'}")
    return True


# ============================================================================
# WIZARD
# ============================================================================

def _retry_until_valid(prompt: str, key: str, config: dict, check) -> tuple:
    while True:
        config[key] = ask(prompt, config.get(key), secret=True)
        ok, msg, *extra = check(config[key])
        say("ok" if ok else "err", msg)
        if ok or not yes("Try again?"):
            return (ok, *extra)


def main():
    parser = argparse.ArgumentParser(description="Configure and deploy the LINE health agent")
    parser.add_argument("--skip-deploy", action="store_true", help="write .env and stop")
    args = parser.parse_args()

    print(_paint("\033[1m", "\nLINE Health Agent setup\n" + "=" * 50))
    config = load_existing_env()

    stage(1, "Anthropic")
    _retry_until_valid("Anthropic API key", "ANTHROPIC_API_KEY", config, validate_anthropic_key)

    stage(2, "LINE channel")
    config["LINE_CHANNEL_SECRET"] = ask("Channel secret", config.get("LINE_CHANNEL_SECRET"), secret=True)
    ok, info = _retry_until_valid(
        "Channel access token", "LINE_CHANNEL_ACCESS_TOKEN", config, validate_line_token
    )
    if ok:
        note(f"Bot: {info.get('displayName', '?')} ({info.get('basicId', '?')})")

    stage(3, "Reminders and storage")
    note("Reminders go to one LINE user ID (starts with 'U', shown in the Developers console).")
    user_id = ask("LINE user ID (blank to skip)", config.get("LINE_USER_ID"))
    if user_id:
        config["LINE_USER_ID"] = user_id
        ok, msg = validate_user_id(config["LINE_CHANNEL_ACCESS_TOKEN"], user_id)
        say("ok" if ok else "err", msg)
    config["SHEET_ID"] = ask("Log sheet name", config.get("SHEET_ID", "health-log"))

    save_env_file(config)
    if args.skip_deploy:
        return 0

    stage(4, "Modal")
    installed, authenticated = check_modal_installed()
    if not (installed and authenticated):
        say("err", "Modal CLI missing or logged out: pip install modal && modal setup")
        return 1
    if not create_modal_secrets(config):
        return 1
    ok, base_url = deploy_to_modal()
    if not ok:
        return 1

    stage(5, "LINE webhook")
    base_url = (base_url or ask("App URL from the deploy output")).rstrip("/")
    if not register_line_webhook(config["LINE_CHANNEL_ACCESS_TOKEN"], f"{base_url}/webhook"):
        return 1

    say("ok", "Done. Try sending the bot: 昨日の昼食はサラダ")
    if config.get("LINE_USER_ID"):
        note(f"Manual reminder: {base_url}/reminder?type=morning")
    return 0


if __name__ == "__main__":
    sys.exit(main())
