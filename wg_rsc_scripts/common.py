import os
import sys
from typing import Optional, Tuple

from .config import DEFAULT_SETTINGS_FILE, Settings
from .routeros import ExportParseResult, read_export
from .template import MissingRequiredField, TemplateDefaults, read_template


def resolve_settings_path(args) -> Tuple[str, bool]:
    """Return the settings path and whether it was asked for explicitly."""
    explicit = getattr(args, "settings", None) or os.environ.get("WGRS_SETTINGS")
    if explicit:
        return explicit, True
    return DEFAULT_SETTINGS_FILE, False


def require_and_load_settings(args) -> Tuple[Optional[Settings], Optional[str]]:
    """Load settings from file (or env when the default file is absent) and apply CLI flags.

    Returns ``(None, None)`` after reporting to stderr when anything is wrong.
    The second item is the settings file actually used, if any.
    """
    path, explicit = resolve_settings_path(args)
    settings_path: Optional[str] = None
    if os.path.exists(path):
        try:
            settings = Settings.read_file(path)
        except Exception as e:
            print(f"Failed to parse settings: {e}", file=sys.stderr)
            return None, None
        settings_path = path
    elif explicit:
        print(f"Settings file not found: {path}", file=sys.stderr)
        return None, None
    else:
        settings = Settings.from_env(os.environ)

    settings.apply_args_overrides(args)
    errs = settings.validate()
    if errs:
        print("Invalid settings:", file=sys.stderr)
        for err in errs:
            print(f"- {err}", file=sys.stderr)
        return None, None
    return settings, settings_path


def load_inputs(
    settings: Settings, settings_path: Optional[str]
) -> Tuple[Optional[TemplateDefaults], Optional[ExportParseResult]]:
    template_path = settings.resolve_template(settings_path)
    try:
        defaults = read_template(template_path)
    except MissingRequiredField as e:
        print(f"Error parsing {template_path}: {e}", file=sys.stderr)
        return None, None
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading template {template_path}: {e}", file=sys.stderr)
        return None, None

    export_path = settings.resolve_export(settings_path)
    try:
        parsed = read_export(export_path, section=settings.section)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading export {export_path}: {e}", file=sys.stderr)
        return defaults, None
    return defaults, parsed
