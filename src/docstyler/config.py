from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    base_url: str
    review_model: str
    review_timeout_s: float
    image_timeout_s: float
    image_workers: int


def load_settings() -> Settings:
    api_key = (os.environ.get("OPENAI_API_KEY") or "").strip()
    # Keys pasted with surrounding quotes (set OPENAI_API_KEY="sk-...") are common.
    if (api_key.startswith('"') and api_key.endswith('"')) or (api_key.startswith("'") and api_key.endswith("'")):
        api_key = api_key[1:-1].strip()

    base_url = (os.environ.get("OPENAI_BASE_URL") or "https://api.openai.com/v1").strip().rstrip("/")
    review_model = (os.environ.get("DOCSTYLER_REVIEW_MODEL") or "gpt-4o-mini").strip()

    return Settings(
        api_key=api_key or None,
        base_url=base_url,
        review_model=review_model,
        review_timeout_s=float(os.environ.get("DOCSTYLER_REVIEW_TIMEOUT_S", "60")),
        image_timeout_s=float(os.environ.get("DOCSTYLER_IMAGE_TIMEOUT_S", "15")),
        image_workers=max(1, int(os.environ.get("DOCSTYLER_IMAGE_WORKERS", "4"))),
    )
