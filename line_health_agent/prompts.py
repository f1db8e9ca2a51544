"""
System prompts, read from the markdown files in prompts/ at import time.
"""

from pathlib import Path

from line_health_agent.extraction.nutrients import report_template

# Image build copies prompts/ to /root/prompts; a checkout keeps it at the repo root
PROMPT_DIRS = (
    Path("/root/prompts"),
    Path(__file__).resolve().parent.parent / "prompts",
)


def get_prompts_dir() -> Path:
    for candidate in PROMPT_DIRS:
        if candidate.is_dir():
            return candidate
    searched = ", ".join(str(p) for p in PROMPT_DIRS)
    raise FileNotFoundError(f"No prompts directory in: {searched}")


def load_prompt(name: str) -> str:
    """Text of prompts/<name>.md without surrounding whitespace."""
    path = get_prompts_dir() / f"{name}.md"
    if not path.is_file():
        raise FileNotFoundError(f"Missing prompt {name!r} ({path})")
    return path.read_text(encoding="utf-8").strip()


# Report layout comes from the parser's field table
NUTRITION_PROMPT = load_prompt("nutrition").replace("{report_template}", report_template())
SUMMARY_FEEDBACK_PROMPT = load_prompt("summary_feedback")
COACH_PROMPT = load_prompt("coach")
