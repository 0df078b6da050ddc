"""User-facing error messages, keyed by locale."""
from __future__ import annotations

DEFAULT_LOCALE = "ja"

MISSING_PARAMS = "missing_params"
BAD_FORMAT = "bad_format"
INVALID_DATE = "invalid_date"
START_AFTER_END = "start_after_end"
RANGE_TOO_LONG = "range_too_long"
UPSTREAM_TIMEOUT = "upstream_timeout"
UNEXPECTED = "unexpected"

# The first two are part of the public contract and are never translated.
MESSAGES: dict[str, dict[str, str]] = {
    "ja": {
        MISSING_PARAMS: "start and end parameters are required",
        BAD_FORMAT: "start and end parameters must be in YYYY-MM-DD format",
        INVALID_DATE: "有効な日付を入力してください",
        START_AFTER_END: "開始日は終了日より前である必要があります",
        RANGE_TOO_LONG: "日付範囲は{max_days}日以内である必要があります",
        UPSTREAM_TIMEOUT: "connpass APIがタイムアウトしました。しばらくしてから再度お試しください",
        UNEXPECTED: "connpass APIへの問い合わせ時にエラーが発生しました",
    },
    "en": {
        MISSING_PARAMS: "start and end parameters are required",
        BAD_FORMAT: "start and end parameters must be in YYYY-MM-DD format",
        INVALID_DATE: "Please enter a valid date",
        START_AFTER_END: "The start date must not be after the end date",
        RANGE_TOO_LONG: "The date range must be at most {max_days} days",
        UPSTREAM_TIMEOUT: "The connpass API timed out. Please try again later",
        UNEXPECTED: "An error occurred while querying the connpass API",
    },
}


def get_message(key: str, locale: str | None = None, **kwargs) -> str:
    """Return the message for ``key`` in ``locale``, falling back to Japanese."""
    catalog = MESSAGES.get(locale or DEFAULT_LOCALE, MESSAGES[DEFAULT_LOCALE])
    return catalog[key].format(**kwargs)
