"""Global application settings.

AppSettings is a plain value object. Loading and saving it is the job of
services.settings_service.SettingsService; nothing here touches storage.
"""

from dataclasses import asdict, dataclass, fields, replace

from domain.model.errors import ValidationError

SETTINGS_VERSION = '1.0'


@dataclass(frozen=True)
class AppSettings:
    # App configuration
    app_name: str = 'My Next Tools'
    app_title: str = 'My Next Tools - Professional Dashboard'
    app_description: str = 'A modern application with powerful tools and features'
    app_keywords: tuple[str, ...] = ('dashboard', 'tools')
    app_author: str = 'Your Company'
    app_version: str = '1.0.0'
    app_url: str = 'https://your-app.com'

    # Authentication
    allow_google_auth: bool = True
    allow_new_user_registration: bool = True
    require_email_verification: bool = False
    allow_guest_mode: bool = False
    restrict_google_to_existing_users: bool = False

    # Features
    enable_dark_mode: bool = True
    enable_multi_language: bool = True
    enable_notifications: bool = True
    enable_analytics: bool = False

    # About
    about_title: str = 'About My Next Tools'
    about_description: str = (
        'My Next Tools is a platform with authentication, user management '
        'and customizable dashboards.'
    )
    contact_email: str = 'support@your-app.com'
    support_url: str = 'https://your-app.com/support'
    privacy_policy_url: str = 'https://your-app.com/privacy'
    terms_of_service_url: str = 'https://your-app.com/terms'

    # Advanced
    session_timeout: int = 60  # minutes
    max_login_attempts: int = 5
    enable_maintenance_mode: bool = False
    maintenance_message: str = 'We are currently performing maintenance. Please check back later.'

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    @classmethod
    def from_dict(cls, values: dict) -> 'AppSettings':
        """Build settings from stored values, ignoring unknown keys."""
        return cls().merged(
            {k: v for k, v in values.items() if k in cls.field_names()}
        )

    def merged(self, changes: dict) -> 'AppSettings':
        """Return a copy with ``changes`` applied.

        Raises:
            ValidationError: unknown key or value of the wrong type
        """
        unknown = set(changes) - self.field_names()
        if unknown:
            raise ValidationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        coerced = {}
        for f in fields(self):
            if f.name not in changes:
                continue
            coerced[f.name] = _coerce(f.name, getattr(self, f.name), changes[f.name])
        return replace(self, **coerced)

    def to_dict(self) -> dict:
        data = asdict(self)
        data['app_keywords'] = list(self.app_keywords)
        return data


def _coerce(name: str, current, value):
    # bool is a subclass of int, so check it first
    if isinstance(current, bool):
        if not isinstance(value, bool):
            raise ValidationError(f"Setting '{name}' must be a boolean")
        return value
    if isinstance(current, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"Setting '{name}' must be an integer")
        if value < 0:
            raise ValidationError(f"Setting '{name}' must not be negative")
        return value
    if isinstance(current, tuple):
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise ValidationError(f"Setting '{name}' must be a list of strings")
        return tuple(value)
    if not isinstance(value, str):
        raise ValidationError(f"Setting '{name}' must be a string")
    return value
