# backend/tutorslot/core/messages.py
"""
Localized, user-facing messages keyed by error code.

Internal diagnostic messages stay in the exception's ``message`` and in the
logs; only the strings below are shown to end users.
"""

from typing import Any, Dict, Optional

from .config import settings

USER_MESSAGES: Dict[str, Dict[str, str]] = {
    "ja": {
        "VALIDATION_ERROR": "入力内容に問題があります。もう一度ご確認ください。",
        "INVALID_TIME_RANGE": "終了時刻は開始時刻より後に設定してください。",
        "OFF_GRID_TIME": "選択できない時間帯です。表示されている時間枠から選択してください。",
        "DATE_NOT_RESERVABLE": "この日付は予約できません。平日の本日以降の日付を選択してください。",
        "SLOT_ALREADY_BOOKED": "この時間枠はすでに予約されています。",
        "SLOT_NOT_SELECTED": "日付と時間を選択してください。",
        "QUOTA_MIN_HOURS": "予約時間は1時間以上を指定してください",
        "QUOTA_EXCEEDED": "月間利用可能時間を超えています。残り時間: {remaining_hours}時間",
        "QUOTA_OK": "予約可能です",
        "COURSE_UNAVAILABLE": "コース情報が取得できません",
        "SLOT_TAKEN": "この時間枠はすでに予約されています。別の時間を選択してください。",
        "PERMISSION_DENIED": "アクセス権限がありません。",
        "AUTH_REQUIRED": "ログインが必要です。",
        "INVALID_CREDENTIALS": "ログインに失敗しました。メールアドレスとパスワードをご確認ください。",
        "EMAIL_TAKEN": "このメールアドレスはすでに登録されています。",
        "INVALID_STATE": "この予約は変更できない状態です。",
        "NOT_FOUND": "予約が見つかりません。",
        "USER_NOT_FOUND": "ユーザー情報が見つかりません。",
        "STORAGE_ERROR": "データの処理中にエラーが発生しました。もう一度お試しください。",
        "SYSTEM_ERROR": "システムエラーが発生しました。管理者にお問い合わせください。",
    },
    "en": {
        "VALIDATION_ERROR": "Some of the information entered is invalid. Please check and try again.",
        "INVALID_TIME_RANGE": "The end time must be after the start time.",
        "OFF_GRID_TIME": "That time is not bookable. Please pick one of the listed time slots.",
        "DATE_NOT_RESERVABLE": "This date cannot be booked. Please pick a weekday from today onward.",
        "SLOT_ALREADY_BOOKED": "This time slot is already booked.",
        "SLOT_NOT_SELECTED": "Please select a date and a time.",
        "QUOTA_MIN_HOURS": "Reservation time must be at least 1 hour",
        "QUOTA_EXCEEDED": "This exceeds your monthly hours. Remaining hours: {remaining_hours}",
        "QUOTA_OK": "Reservation is possible",
        "COURSE_UNAVAILABLE": "Course information is not available",
        "SLOT_TAKEN": "This time slot has just been booked. Please choose another time.",
        "PERMISSION_DENIED": "You do not have permission to do this.",
        "AUTH_REQUIRED": "Please sign in.",
        "INVALID_CREDENTIALS": "Sign-in failed. Please check your email address and password.",
        "EMAIL_TAKEN": "This email address is already registered.",
        "INVALID_STATE": "This reservation can no longer be changed.",
        "NOT_FOUND": "The reservation could not be found.",
        "USER_NOT_FOUND": "The user could not be found.",
        "STORAGE_ERROR": "Something went wrong while saving your data. Please try again.",
        "SYSTEM_ERROR": "A system error occurred. Please contact an administrator.",
    },
}


def get_user_message(key: str, locale: Optional[str] = None, **params: Any) -> str:
    """
    Look up a user-facing message.

    Falls back to the default locale, then to the generic system message.
    """
    catalog = USER_MESSAGES.get(locale or settings.default_locale) or USER_MESSAGES["ja"]
    template = catalog.get(key) or catalog["SYSTEM_ERROR"]
    if params:
        try:
            return template.format(**params)
        except (KeyError, IndexError):
            return template
    return template
