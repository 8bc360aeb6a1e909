import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import yaml  # type: ignore

from .render import DEFAULT_WIREGUARD_DIR
from .routeros import DEFAULT_SECTION, SECTION_DELIMITER

ENV_PREFIX = "WGRS_"
DEFAULT_SETTINGS_FILE = "wg-rsc.yml"


@dataclass()
class Settings:
    template_path: str = "wg.conf"
    export_path: str = "wg.rsc"
    output_path: str = "."
    extension: str = ".cmd"
    wireguard_dir: str = DEFAULT_WIREGUARD_DIR
    emit_qr: bool = False
    section: str = DEFAULT_SECTION

    # File IO
    @classmethod
    def read_file(cls, path: str) -> "Settings":
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        data = load_yaml(text)
        return parse_settings(data)

    def write_file(self, path: str, overwrite: bool = False) -> None:
        if os.path.exists(path) and not overwrite:
            raise FileExistsError(f"Refusing to overwrite existing file: {path}")
        parent = os.path.dirname(os.path.abspath(path))
        if parent and not os.path.exists(parent):
            os.makedirs(parent, exist_ok=True)
        text = dump_yaml(to_yaml_dict(self))
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

    # Paths are relative to the settings file, or to the cwd without one
    def _resolve(self, value: str, settings_path: Optional[str]) -> str:
        if settings_path:
            base = os.path.dirname(os.path.abspath(settings_path))
        else:
            base = os.getcwd()
        return os.path.abspath(os.path.join(base, value))

    def resolve_template(self, settings_path: Optional[str]) -> str:
        return self._resolve(self.template_path, settings_path)

    def resolve_export(self, settings_path: Optional[str]) -> str:
        return self._resolve(self.export_path, settings_path)

    def resolve_output_dir(self, settings_path: Optional[str]) -> str:
        return self._resolve(self.output_path, settings_path)

    # Validation
    def validate(self) -> List[str]:
        errs: List[str] = []
        for label, value in (
            ("template", self.template_path),
            ("export", self.export_path),
            ("output-path", self.output_path),
            ("wireguard-dir", self.wireguard_dir),
            ("section", self.section),
        ):
            if not value or not value.strip():
                errs.append(f"{label} must be non-empty")
        if not self.extension.startswith("."):
            errs.append(f"extension must start with '.': {self.extension!r}")
        if self.section and not self.section.startswith(SECTION_DELIMITER):
            errs.append(f"section must start with '{SECTION_DELIMITER}': {self.section!r}")
        return errs

    def validate_or_raise(self) -> None:
        errs = self.validate()
        if errs:
            raise ValueError("Settings validation failed:\n- " + "\n- ".join(errs))

    # Fill from env/args
    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "Settings":
        r = EnvReader(env)
        defaults = cls()
        return cls(
            template_path=r.get("TEMPLATE", defaults.template_path) or defaults.template_path,
            export_path=r.get("EXPORT", defaults.export_path) or defaults.export_path,
            output_path=r.get("OUTPUT_PATH", defaults.output_path) or defaults.output_path,
            extension=r.get("EXTENSION", defaults.extension) or defaults.extension,
            wireguard_dir=r.get("WIREGUARD_DIR", defaults.wireguard_dir) or defaults.wireguard_dir,
            emit_qr=r.get_bool("EMIT_QR", defaults.emit_qr),
            section=r.get("SECTION", defaults.section) or defaults.section,
        )

    def apply_args_overrides(self, args: object) -> None:
        for attr, flag in (
            ("template_path", "template"),
            ("export_path", "export"),
            ("output_path", "output_path"),
            ("extension", "extension"),
            ("wireguard_dir", "wireguard_dir"),
            ("section", "section"),
        ):
            val = getattr(args, flag, None)
            if val is not None:
                setattr(self, attr, str(val))
        if getattr(args, "emit_qr", None) is not None:
            self.emit_qr = bool(getattr(args, "emit_qr"))


class EnvReader:
    def __init__(self, env: Mapping[str, str], prefix: str = ENV_PREFIX) -> None:
        self._env = env
        self._prefix = prefix

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._env.get(self._prefix + key, default)

    def get_bool(self, key: str, default: bool) -> bool:
        val = self._env.get(self._prefix + key)
        if val is None:
            return default
        val_lower = val.strip().lower()
        if val_lower in {"1", "true", "yes", "y", "on"}:
            return True
        if val_lower in {"0", "false", "no", "n", "off"}:
            return False
        return default


def to_yaml_dict(s: Settings) -> Dict[str, Any]:
    return {
        "template": s.template_path,
        "export": s.export_path,
        "output-path": s.output_path,
        "extension": s.extension,
        "wireguard-dir": s.wireguard_dir,
        "emit-qr": s.emit_qr,
        "section": s.section,
    }


def dump_yaml(data: Dict[str, Any]) -> str:
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)


def load_yaml(text: str) -> Dict[str, Any]:
    obj = yaml.safe_load(text)
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueError("Invalid YAML root: expected mapping")
    return obj


def parse_settings(data: Dict[str, Any]) -> Settings:
    defaults = Settings()
    return Settings(
        template_path=str(data.get("template", defaults.template_path)),
        export_path=str(data.get("export", defaults.export_path)),
        output_path=str(data.get("output-path", defaults.output_path)),
        extension=str(data.get("extension", defaults.extension)),
        wireguard_dir=str(data.get("wireguard-dir", defaults.wireguard_dir)),
        emit_qr=bool(data.get("emit-qr", defaults.emit_qr)),
        section=str(data.get("section", defaults.section)),
    )
